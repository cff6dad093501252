"""
partialgen - projection types for record schemas.

Derives reduced "partial" record types from a full record, together with
the conversions between them, so a record can be split into a projection
and a remainder and reassembled without loss.
"""

from __future__ import annotations

# Re-export commonly used types for convenience
from ._version import get_version
from .core import ir
from .core.engine import generate
from .core.errors import (
    ConflictingClassificationError,
    DirectiveSyntaxError,
    NameCollisionError,
    PartialGenError,
    UnknownFieldError,
    UnsupportedShapeError,
)
from .runtime import materialize, partial, projections_of

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "generate",
    "materialize",
    "partial",
    "projections_of",
    "PartialGenError",
    "DirectiveSyntaxError",
    "UnsupportedShapeError",
    "UnknownFieldError",
    "ConflictingClassificationError",
    "NameCollisionError",
]
