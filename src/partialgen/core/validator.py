"""
Semantic validation of source records and their projection directives.

Validates that a record can be projected at all, and that each directive's
omit/optional sets name real fields and do not overlap.
"""

from __future__ import annotations

from collections.abc import Sequence

from . import ir
from .errors import (
    ConflictingClassificationError,
    ErrorContext,
    NameCollisionError,
    UnknownFieldError,
    UnsupportedShapeError,
)
from .naming import operation_name, projection_method_names

# Names referenced inside generated methods; omitted and optional fields
# become method parameters and must not shadow them.
RESERVED_PARAMETER_NAMES = frozenset({"self", "cls", "_copy"})


def validate_record_shape(record: ir.SourceRecord) -> None:
    """
    Check the record is a named-field composite with at least one field.

    Runs once per record, before any directive is examined.

    Raises:
        UnsupportedShapeError: For positional, unit, field-less or variant records
    """
    context = ErrorContext(line=1, column=1, record=record.name)

    if record.shape == ir.RecordShape.VARIANT:
        raise UnsupportedShapeError(
            f"Cannot project '{record.name}': variant (enum/union) records are not supported",
            context,
        )
    if record.shape == ir.RecordShape.POSITIONAL:
        raise UnsupportedShapeError(
            f"Cannot project '{record.name}': only records with named fields are supported, "
            "not positional fields",
            context,
        )
    if record.shape == ir.RecordShape.UNIT or not record.fields:
        raise UnsupportedShapeError(
            f"Cannot project '{record.name}': the record has no fields",
            context,
        )
    unnamed = [i for i, f in enumerate(record.fields) if f.name is None]
    if unnamed:
        raise UnsupportedShapeError(
            f"Cannot project '{record.name}': field(s) at position "
            f"{', '.join(str(i) for i in unnamed)} have no name",
            context,
        )


def validate_directive(
    record: ir.SourceRecord,
    directive: ir.Directive,
    directive_index: int | None = None,
) -> None:
    """
    Check one directive against the record's fields.

    Raises:
        UnknownFieldError: If omit/optional name an undeclared field
        ConflictingClassificationError: If a field is both omitted and optional
    """
    context = ErrorContext(
        line=directive.line,
        column=directive.column,
        record=record.name,
        directive_index=directive_index,
    )
    declared = set(record.field_names)

    unknown = sorted({n for n in (*directive.omit, *directive.optional) if n not in declared})
    if unknown:
        raise UnknownFieldError(
            f"Unknown field(s) {_quote(unknown)} on '{record.name}'; "
            f"declared fields are {_quote(record.field_names)}",
            context,
        )

    conflicting = sorted(set(directive.omit) & set(directive.optional))
    if conflicting:
        raise ConflictingClassificationError(
            f"Field(s) {_quote(conflicting)} cannot be both omitted and optional",
            context,
        )


def validate_target_names(
    record: ir.SourceRecord,
    directives: Sequence[ir.Directive],
) -> None:
    """
    Check generated names do not clash with each other or with the record.

    Covers projection and remainder type names, generated method names
    versus field names, and parameters versus method receivers. Each
    directive is checked against the ones before it, so the reported
    collision is the first one in attachment order.

    Raises:
        NameCollisionError: On the first clashing name
    """
    taken: dict[str, str] = {record.name: f"the source record '{record.name}'"}

    for index, directive in enumerate(directives):
        context = ErrorContext(
            line=directive.line,
            column=directive.column,
            record=record.name,
            directive_index=index,
        )
        target = directive.resolve_target_name(record.name)
        names = [target]
        if directive.omit:
            names.append(directive.remainder_name(record.name))

        for name in names:
            if name in taken:
                raise NameCollisionError(
                    f"Generated type name '{name}' collides with {taken[name]}",
                    context,
                )
        for name in names:
            taken[name] = f"a type generated by directive #{index + 1}"

        kept = [n for n in record.field_names if n not in directive.omit]
        for method in projection_method_names(record.name, target):
            if method in kept:
                raise NameCollisionError(
                    f"Field '{method}' on '{target}' collides with a generated method",
                    context,
                )
        for name in (*directive.omit, *directive.optional):
            if name in RESERVED_PARAMETER_NAMES or name == record.name:
                raise NameCollisionError(
                    f"Field '{name}' cannot be omitted or optional: as a parameter "
                    f"it would shadow a name the generated methods use",
                    context,
                )
        mirror = operation_name(ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER, record.name, target)
        if mirror in record.field_names:
            raise NameCollisionError(
                f"Field '{mirror}' on '{record.name}' collides with a generated method",
                context,
            )


def _quote(names: Sequence[str]) -> str:
    return ", ".join(f"'{n}'" for n in names)


def validate_module_type_names(
    results: Sequence[ir.GenerationResult],
    include_records: bool = True,
) -> None:
    """
    Check type names are unique across records rendered into one module.

    Per-record checks cannot see a second record that generates the same
    projection name, or a record named like another record's projection.

    Raises:
        NameCollisionError: On the first name defined twice
    """
    owners: dict[str, str] = {}

    def claim(name: str, owner: str, record: str) -> None:
        if name in owners:
            raise NameCollisionError(
                f"Type '{name}' from {owner} collides with the same name from {owners[name]}",
                ErrorContext(line=1, column=1, record=record),
            )
        owners[name] = owner

    if include_records:
        for result in results:
            claim(result.record.name, f"the source record '{result.record.name}'", result.record.name)
    for result in results:
        record = result.record.name
        for output in result.outputs:
            claim(output.projection.name, f"a projection of '{record}'", record)
            if output.remainder is not None:
                claim(output.remainder.name, f"a remainder of '{record}'", record)
