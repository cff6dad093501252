"""
Generated-type and operation descriptions for partialgen IR.

These models are what a generation pass produces. They describe the
projection type, the optional remainder type, and the five conversion
operations in an emitter-neutral way; :mod:`partialgen.render` turns them
into Python source.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .directives import Directive
from .records import FieldSpec

UNIT_TYPE = "None"


class FieldClass(StrEnum):
    """Classification of a source field under one directive."""

    INCLUDED = "included"
    OMITTED = "omitted"
    OPTIONAL = "optional"


class ClassifiedField(BaseModel):
    """A source field paired with its classification."""

    field: FieldSpec
    field_class: FieldClass

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        if self.field.name is None:
            raise ValueError("Positional fields cannot be classified")
        return self.field.name


class FieldClassification(BaseModel):
    """
    Total classification of a record's fields under one directive.

    ``entries`` keeps the record's declaration order; that order, not the
    grouping order, governs reconstruction.
    """

    record_name: str
    target_name: str
    entries: tuple[ClassifiedField, ...]

    model_config = ConfigDict(frozen=True)

    def of(self, field_class: FieldClass) -> list[FieldSpec]:
        """Fields of one class, in declaration order."""
        return [e.field for e in self.entries if e.field_class == field_class]

    @property
    def included(self) -> list[FieldSpec]:
        return self.of(FieldClass.INCLUDED)

    @property
    def omitted(self) -> list[FieldSpec]:
        return self.of(FieldClass.OMITTED)

    @property
    def optional(self) -> list[FieldSpec]:
        return self.of(FieldClass.OPTIONAL)

    @property
    def declaration_order(self) -> list[str]:
        return [e.name for e in self.entries]

    def class_of(self, name: str) -> FieldClass | None:
        for entry in self.entries:
            if entry.name == name:
                return entry.field_class
        return None


class PresenceContainer(StrEnum):
    """How a generated field holds its value."""

    BARE = "bare"  # value stored as-is
    OPTIONAL = "optional"  # value or absent (rendered ``T | None``)


class GeneratedField(BaseModel):
    """
    A field of a generated type.

    Attributes:
        name: Field name (same as the source field)
        type: Source field type expression, unwrapped
        container: Whether the value is wrapped in a presence container
        annotations: Source annotations, copied verbatim
        field_class: Classification the field came from
    """

    name: str
    type: str
    container: PresenceContainer = PresenceContainer.BARE
    annotations: tuple[str, ...] = ()
    field_class: FieldClass = FieldClass.INCLUDED

    model_config = ConfigDict(frozen=True)

    @property
    def type_expr(self) -> str:
        """Type expression including the presence container."""
        if self.container == PresenceContainer.OPTIONAL:
            return f"{self.type} | None"
        return self.type


class GeneratedProjection(BaseModel):
    """
    Description of a projection type.

    Attributes:
        name: Projection type name
        source_name: Name of the source record
        fields: Included and optional fields, in declaration order
        capabilities: Capability requests, forwarded unverified
        doc: Docstring for the generated type
    """

    name: str
    source_name: str
    fields: tuple[GeneratedField, ...] = ()
    capabilities: tuple[str, ...] = ()
    doc: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def included(self) -> list[GeneratedField]:
        return [f for f in self.fields if f.field_class == FieldClass.INCLUDED]

    @property
    def optional(self) -> list[GeneratedField]:
        return [f for f in self.fields if f.field_class == FieldClass.OPTIONAL]


class GeneratedRemainder(BaseModel):
    """Description of the remainder type holding a projection's omitted fields."""

    name: str
    source_name: str
    fields: tuple[GeneratedField, ...]
    capabilities: tuple[str, ...] = ()
    doc: str = ""

    model_config = ConfigDict(frozen=True)


class OperationKind(StrEnum):
    """The five generated operations."""

    TO_FULL = "to_full"
    TO_FULL_CLONED = "to_full_cloned"
    FROM_FULL = "from_full"
    FROM_FULL_WITH_REMAINDER = "from_full_with_remainder"
    INTO_PROJECTION_WITH_REMAINDER = "into_projection_with_remainder"


class Receiver(StrEnum):
    """How an operation takes its subject."""

    CONSUMED = "consumed"  # instance method; the instance is given up
    BORROWED = "borrowed"  # instance method; the instance stays usable
    CLASS = "class"  # alternate constructor


class ParameterRole(StrEnum):
    OMITTED = "omitted"  # value for an omitted field
    OVERRIDE = "override"  # fallback for an optional field
    FULL = "full"  # the full source record


class ParameterSpec(BaseModel):
    """A parameter of a generated operation."""

    name: str
    type: str
    role: ParameterRole
    default: str | None = None

    model_config = ConfigDict(frozen=True)


class ValueSource(StrEnum):
    """Where a binding reads its value from."""

    SELF = "self"
    PARAMETER = "parameter"
    SELF_OR_PARAMETER = "self_or_parameter"
    FULL = "full"
    FULL_AS_PRESENT = "full_as_present"


class BindTarget(StrEnum):
    FULL = "full"
    PROJECTION = "projection"
    REMAINDER = "remainder"


class FieldBinding(BaseModel):
    """
    One field assignment performed by an operation.

    Attributes:
        target: Which constructed value receives the field
        field: Field name
        source: Where the value comes from
        parameter: Parameter name when the source involves a parameter
        duplicate: Deep-copy the value instead of moving it
    """

    target: BindTarget
    field: str
    source: ValueSource
    parameter: str | None = None
    duplicate: bool = False

    model_config = ConfigDict(frozen=True)


class CapabilityRequirement(BaseModel):
    """A capability the downstream type checker must confirm for a type."""

    type: str
    capability: str

    model_config = ConfigDict(frozen=True)


class OperationSpec(BaseModel):
    """
    Description of one generated operation.

    Attributes:
        kind: Which of the five operations this is
        name: Method name on the owning type
        owner: Type the method is defined on
        receiver: How the subject is taken
        parameters: Parameters after the receiver, in order
        returns: Return type expression
        bindings: Field assignments, in declaration order of the source record
        requires: Capability requirements forwarded to the type checker
        delegate: Operation this one forwards to, if any
        doc: Docstring for the generated method
    """

    kind: OperationKind
    name: str
    owner: str
    receiver: Receiver
    parameters: tuple[ParameterSpec, ...] = ()
    returns: str
    bindings: tuple[FieldBinding, ...] = ()
    requires: tuple[CapabilityRequirement, ...] = ()
    delegate: str | None = None
    doc: str = ""

    model_config = ConfigDict(frozen=True)


class GeneratedOperations(BaseModel):
    """The five operations bound to one projection/remainder pair."""

    to_full: OperationSpec
    to_full_cloned: OperationSpec
    from_full: OperationSpec
    from_full_with_remainder: OperationSpec
    into_projection_with_remainder: OperationSpec

    model_config = ConfigDict(frozen=True)

    def all(self) -> list[OperationSpec]:
        """All operations in generation order."""
        return [
            self.to_full,
            self.to_full_cloned,
            self.from_full,
            self.from_full_with_remainder,
            self.into_projection_with_remainder,
        ]

    def owned_by(self, owner: str) -> list[OperationSpec]:
        return [op for op in self.all() if op.owner == owner]


class ProjectionOutput(BaseModel):
    """Everything generated for one directive."""

    directive: Directive
    classification: FieldClassification
    projection: GeneratedProjection
    remainder: GeneratedRemainder | None = None
    operations: GeneratedOperations

    model_config = ConfigDict(frozen=True)

    @property
    def remainder_type(self) -> str:
        """Remainder type expression; the unit type when nothing is omitted."""
        return self.remainder.name if self.remainder else UNIT_TYPE
