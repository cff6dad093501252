"""
Projection generation engine.

A generation pass takes one source record and its raw directives and either
produces one :class:`ir.ProjectionOutput` per directive or a single
diagnostic. The pass is pure: no I/O and no state shared between calls, so
independent records can be processed concurrently by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from . import ir
from .collector import collect_directives
from .directive_parser import RawDirective
from .errors import PartialGenError, with_location
from .partitioner import partition_fields
from .synthesizer import synthesize_operations, synthesize_projection, synthesize_remainder
from .validator import (
    validate_directive,
    validate_record_shape,
    validate_target_names,
)

logger = logging.getLogger(__name__)


def expand_record(
    record: ir.SourceRecord,
    raw_directives: Sequence[RawDirective] = (),
) -> list[ir.ProjectionOutput]:
    """
    Run a generation pass, raising on the first error.

    Args:
        record: Source record
        raw_directives: Directive texts or token lists, in attachment order

    Returns:
        One ProjectionOutput per directive, in directive order

    Raises:
        DirectiveSyntaxError: Malformed directive
        UnsupportedShapeError: Record is not a named-field composite
        UnknownFieldError: Directive names an undeclared field
        ConflictingClassificationError: Field both omitted and optional
        NameCollisionError: Generated names clash
    """
    validate_record_shape(record)
    directives = collect_directives(raw_directives, record.name)

    for index, directive in enumerate(directives):
        validate_directive(record, directive, index)
        validate_target_names(record, directives[: index + 1])

    outputs = [project(record, directive) for directive in directives]
    logger.debug(
        "Generated %s for %s",
        ", ".join(o.projection.name for o in outputs),
        record.name,
    )
    return outputs


def project(record: ir.SourceRecord, directive: ir.Directive) -> ir.ProjectionOutput:
    """
    Build everything generated for one validated directive.

    Args:
        record: Validated source record
        directive: Directive that passed validation against ``record``
    """
    classification = partition_fields(record, directive)
    projection = synthesize_projection(classification, directive)
    remainder = synthesize_remainder(classification, directive)
    operations = synthesize_operations(classification, projection, remainder)
    return ir.ProjectionOutput(
        directive=directive,
        classification=classification,
        projection=projection,
        remainder=remainder,
        operations=operations,
    )


def generate(
    record: ir.SourceRecord,
    raw_directives: Sequence[RawDirective] = (),
) -> ir.GenerationResult:
    """
    Run a generation pass, reporting failure as a diagnostic.

    An error aborts the whole pass: the result then carries no outputs and
    exactly one diagnostic.

    Args:
        record: Source record
        raw_directives: Directive texts or token lists, in attachment order

    Returns:
        GenerationResult with outputs or a single diagnostic
    """
    try:
        outputs = expand_record(record, raw_directives)
    except PartialGenError as e:
        error = with_location(e, record=record.name)
        logger.debug("Generation failed for %s: %s", record.name, error.message)
        return ir.GenerationResult(
            record=record,
            diagnostics=(ir.Diagnostic.from_error(error),),
            error=error,
        )
    return ir.GenerationResult(record=record, outputs=tuple(outputs))
