"""
Error types for partialgen directive parsing, validation, and loading.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Optional


class ErrorKind(StrEnum):
    """Diagnostic kinds surfaced by a generation pass."""

    DIRECTIVE_SYNTAX = "directive_syntax"
    UNSUPPORTED_SHAPE = "unsupported_shape"
    UNKNOWN_FIELD = "unknown_field"
    CONFLICTING_CLASSIFICATION = "conflicting_classification"
    NAME_COLLISION = "name_collision"


class PartialGenError(Exception):
    """Base exception for all partialgen errors."""

    kind: ErrorKind | None = None

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DirectiveSyntaxError(PartialGenError):
    """
    Raised when a projection directive cannot be parsed.

    Examples:
    - Unknown clause keyword
    - Second target-name string literal
    - Repeated derive/omit/optional clause
    - Malformed parenthesized list
    """

    kind = ErrorKind.DIRECTIVE_SYNTAX


class UnsupportedShapeError(PartialGenError):
    """
    Raised when a source record is not a named-field composite.

    Examples:
    - Positional (tuple-like) records
    - Unit or field-less records
    - Variant (enum/union) records
    """

    kind = ErrorKind.UNSUPPORTED_SHAPE


class UnknownFieldError(PartialGenError):
    """Raised when omit(...) or optional(...) names a field the record lacks."""

    kind = ErrorKind.UNKNOWN_FIELD


class ConflictingClassificationError(PartialGenError):
    """Raised when a field is listed in both omit(...) and optional(...)."""

    kind = ErrorKind.CONFLICTING_CLASSIFICATION


class NameCollisionError(PartialGenError):
    """
    Raised when a generated type name clashes with another name on the record.

    Examples:
    - Target name equal to the source record name
    - Two directives with the same target name
    - A target name equal to another directive's remainder name
    """

    kind = ErrorKind.NAME_COLLISION


class SchemaLoadError(PartialGenError):
    """Raised when a YAML schema file cannot be read into source records."""

    pass


class ManifestError(PartialGenError):
    """Raised when partialgen.toml contains invalid configuration."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        line: Line number inside the directive text (1-indexed)
        column: Column number inside the directive text (1-indexed)
        file: Optional schema file the record came from
        record: Optional name of the source record
        directive_index: Optional position of the directive on the record (0-indexed)
        snippet: Optional directive text showing the error location
    """

    line: int
    column: int
    file: Path | None = None
    record: str | None = None
    directive_index: int | None = None
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "users.yaml:1:7 in record User (directive #2)"
        """
        location = f"{self.line}:{self.column}"
        if self.file:
            location = f"{self.file}:{location}"
        if self.record:
            location += f" in record {self.record}"
        if self.directive_index is not None:
            location += f" (directive #{self.directive_index + 1})"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the directive text with an error marker under the column."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []
        for i, line in enumerate(lines, start=1):
            prefix = f"{i:4d} | "
            formatted.append(prefix + line)
            if i == self.line:
                formatted.append(" " * (len(prefix) + self.column - 1) + "^")

        return "\n".join(formatted)


def make_syntax_error(
    message: str,
    line: int,
    column: int,
    snippet: str | None = None,
) -> DirectiveSyntaxError:
    """
    Helper to create a DirectiveSyntaxError with position context.

    Args:
        message: Error description
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional directive text

    Returns:
        DirectiveSyntaxError with context attached
    """
    context = ErrorContext(line=line, column=column, snippet=snippet)
    return DirectiveSyntaxError(message, context)


def with_location(
    error: PartialGenError,
    record: str | None = None,
    directive_index: int | None = None,
    file: Path | None = None,
) -> PartialGenError:
    """
    Attach record/directive/file information to an error raised deeper down.

    Errors raised by the lexer and parser only know positions inside the
    directive text; the collector and engine know which record and which
    directive they were working on.

    Returns:
        The same error instance, with its context filled in and message refreshed
    """
    if error.context is None:
        error.context = ErrorContext(line=1, column=1)
    if record is not None and error.context.record is None:
        error.context.record = record
    if directive_index is not None and error.context.directive_index is None:
        error.context.directive_index = directive_index
    if file is not None and error.context.file is None:
        error.context.file = file
    error.args = (error._format_message(),)
    return error
