"""
Field partitioning: classify every source field under one directive.
"""

from __future__ import annotations

from . import ir


def partition_fields(record: ir.SourceRecord, directive: ir.Directive) -> ir.FieldClassification:
    """
    Classify each field as omitted, optional or included, in declaration order.

    Omission is checked before optionality; the validator guarantees the two
    sets are disjoint, so every field lands in exactly one class.

    Args:
        record: Validated source record
        directive: Validated directive

    Returns:
        FieldClassification preserving the record's field order
    """
    omit = set(directive.omit)
    optional = set(directive.optional)

    entries = []
    for field in record.fields:
        if field.name in omit:
            field_class = ir.FieldClass.OMITTED
        elif field.name in optional:
            field_class = ir.FieldClass.OPTIONAL
        else:
            field_class = ir.FieldClass.INCLUDED
        entries.append(ir.ClassifiedField(field=field, field_class=field_class))

    return ir.FieldClassification(
        record_name=record.name,
        target_name=directive.resolve_target_name(record.name),
        entries=tuple(entries),
    )
