"""
partialgen core: directive parsing, validation, and projection synthesis.
"""

from .engine import expand_record, generate, project
from .errors import (
    ConflictingClassificationError,
    DirectiveSyntaxError,
    NameCollisionError,
    PartialGenError,
    UnknownFieldError,
    UnsupportedShapeError,
)

__all__ = [
    "expand_record",
    "generate",
    "project",
    "ConflictingClassificationError",
    "DirectiveSyntaxError",
    "NameCollisionError",
    "PartialGenError",
    "UnknownFieldError",
    "UnsupportedShapeError",
]
