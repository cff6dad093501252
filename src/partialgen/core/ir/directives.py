"""
Projection directive definitions for partialgen IR.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

DEFAULT_TARGET_PREFIX = "Partial"
REMAINDER_SUFFIX = "Omitted"


class Directive(BaseModel):
    """
    One parsed projection request.

    Examples:
        - ``omit(id)``: Directive(omit=("id",))
        - ``"UserForm", derive(frozen)``: Directive(target_name="UserForm", capabilities=("frozen",))
        - no directive at all: Directive()

    Attributes:
        target_name: Name of the generated projection type (None = default)
        capabilities: Capability requests forwarded to the projection, in order
        omit: Fields moved out of the projection into the remainder
        optional: Fields kept in the projection as present-or-absent values
        line: Line of the directive's first token (1-indexed)
        column: Column of the directive's first token (1-indexed)
    """

    target_name: str | None = None
    capabilities: tuple[str, ...] = ()
    omit: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    line: int = 1
    column: int = 1

    model_config = ConfigDict(frozen=True)

    def resolve_target_name(self, record_name: str) -> str:
        """Target name, defaulting to ``Partial<Record>``."""
        if self.target_name:
            return self.target_name
        return f"{DEFAULT_TARGET_PREFIX}{record_name}"

    def remainder_name(self, record_name: str) -> str:
        """Name of the remainder type holding omitted fields."""
        return f"{self.resolve_target_name(record_name)}{REMAINDER_SUFFIX}"

    @property
    def is_default(self) -> bool:
        """True when the directive requests nothing beyond the defaults."""
        return not (self.target_name or self.capabilities or self.omit or self.optional)
