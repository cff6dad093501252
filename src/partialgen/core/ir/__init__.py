"""
partialgen Intermediate Representation (IR) types.

Source records and directives are the engine's input; projections,
remainders and operation descriptions are its output.

All types are re-exported from this package.
"""

# Directives
from .directives import (
    DEFAULT_TARGET_PREFIX,
    REMAINDER_SUFFIX,
    Directive,
)

# Generated types and operations
from .projection import (
    UNIT_TYPE,
    BindTarget,
    CapabilityRequirement,
    ClassifiedField,
    FieldBinding,
    FieldClass,
    FieldClassification,
    GeneratedField,
    GeneratedOperations,
    GeneratedProjection,
    GeneratedRemainder,
    OperationKind,
    OperationSpec,
    ParameterRole,
    ParameterSpec,
    PresenceContainer,
    ProjectionOutput,
    Receiver,
    ValueSource,
)

# Source records
from .records import (
    FieldSpec,
    RecordShape,
    SourceRecord,
)

# Results
from .results import (
    Diagnostic,
    GenerationResult,
)

__all__ = [
    # Directives
    "DEFAULT_TARGET_PREFIX",
    "REMAINDER_SUFFIX",
    "Directive",
    # Generated types and operations
    "UNIT_TYPE",
    "BindTarget",
    "CapabilityRequirement",
    "ClassifiedField",
    "FieldBinding",
    "FieldClass",
    "FieldClassification",
    "GeneratedField",
    "GeneratedOperations",
    "GeneratedProjection",
    "GeneratedRemainder",
    "OperationKind",
    "OperationSpec",
    "ParameterRole",
    "ParameterSpec",
    "PresenceContainer",
    "ProjectionOutput",
    "Receiver",
    "ValueSource",
    # Source records
    "FieldSpec",
    "RecordShape",
    "SourceRecord",
    # Results
    "Diagnostic",
    "GenerationResult",
]
