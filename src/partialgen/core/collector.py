"""
Directive collection for a single source record.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from . import ir
from .directive_parser import RawDirective, parse_directive
from .errors import PartialGenError, with_location

logger = logging.getLogger(__name__)


def collect_directives(
    raw_directives: Sequence[RawDirective],
    record_name: str | None = None,
) -> list[ir.Directive]:
    """
    Parse every directive attached to a record.

    Parsing stops at the first malformed directive, whose error is raised
    with the record name and directive index attached; later directives are
    not looked at. With no directives at all, a single default directive is
    produced.

    Args:
        raw_directives: Directive texts or token lists, in attachment order
        record_name: Name of the record, for error context

    Returns:
        Parsed directives in attachment order (never empty)

    Raises:
        DirectiveSyntaxError: For the first malformed directive
    """
    if not raw_directives:
        logger.debug("No directives on %s, using the default projection", record_name)
        return [ir.Directive()]

    directives: list[ir.Directive] = []
    for index, raw in enumerate(raw_directives):
        try:
            directives.append(parse_directive(raw))
        except PartialGenError as e:
            raise with_location(e, record=record_name, directive_index=index) from None

    logger.debug("Collected %d directive(s) on %s", len(directives), record_name)
    return directives
