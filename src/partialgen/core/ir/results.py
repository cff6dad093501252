"""
Generation pass results and diagnostics.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ErrorKind, PartialGenError
from .projection import ProjectionOutput
from .records import SourceRecord


class Diagnostic(BaseModel):
    """
    A single structured error surfaced by a failed generation pass.

    Attributes:
        kind: Error category
        message: Human-readable description (without location prefix)
        line: Line inside the directive text (1-indexed)
        column: Column inside the directive text (1-indexed)
        record: Source record the pass was working on
        directive_index: Directive being processed, if any (0-indexed)
    """

    kind: ErrorKind
    message: str
    line: int
    column: int
    record: str | None = None
    directive_index: int | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_error(cls, error: PartialGenError) -> Diagnostic:
        if error.kind is None:
            raise ValueError(f"{type(error).__name__} is not a generation diagnostic")
        context = error.context
        return cls(
            kind=error.kind,
            message=error.message,
            line=context.line if context else 1,
            column=context.column if context else 1,
            record=context.record if context else None,
            directive_index=context.directive_index if context else None,
        )

    def format(self) -> str:
        location = f"{self.line}:{self.column}"
        if self.record:
            location = f"{self.record} {location}"
        if self.directive_index is not None:
            location += f" (directive #{self.directive_index + 1})"
        return f"{location}: {self.kind.value}: {self.message}"


class GenerationResult(BaseModel):
    """
    Outcome of one generation pass over a source record.

    Either ``outputs`` holds one entry per directive and ``diagnostics`` is
    empty, or ``outputs`` is empty and ``diagnostics`` holds exactly one entry.
    """

    record: SourceRecord
    outputs: tuple[ProjectionOutput, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    error: PartialGenError | None = Field(default=None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def raise_for_diagnostics(self) -> None:
        """Re-raise the error behind the diagnostic, if the pass failed."""
        if self.error is not None:
            raise self.error
