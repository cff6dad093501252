"""
Type and conversion synthesis.

Turns a field classification into the description of a projection type, an
optional remainder type, and the five operations relating them to the source
record. Nothing here can fail: every input has already been validated.
"""

from __future__ import annotations

from . import ir
from .naming import operation_name

DUPLICABLE = "duplicable"


def synthesize_projection(
    classification: ir.FieldClassification,
    directive: ir.Directive,
) -> ir.GeneratedProjection:
    """
    Describe the projection type.

    Included fields are copied with type and annotations unchanged; optional
    fields are wrapped in a presence container. Capability requests are
    attached as given, in directive order.
    """
    fields = []
    for entry in classification.entries:
        if entry.field_class == ir.FieldClass.OMITTED:
            continue
        container = (
            ir.PresenceContainer.OPTIONAL
            if entry.field_class == ir.FieldClass.OPTIONAL
            else ir.PresenceContainer.BARE
        )
        fields.append(_generated_field(entry, container))

    return ir.GeneratedProjection(
        name=classification.target_name,
        source_name=classification.record_name,
        fields=tuple(fields),
        capabilities=directive.capabilities,
        doc=_projection_doc(classification),
    )


def synthesize_remainder(
    classification: ir.FieldClassification,
    directive: ir.Directive,
) -> ir.GeneratedRemainder | None:
    """
    Describe the remainder type, or None when nothing is omitted.

    With no omitted fields the remainder is the unit value and no named type
    is generated. The remainder carries the same capability requests as the
    projection.
    """
    omitted = [e for e in classification.entries if e.field_class == ir.FieldClass.OMITTED]
    if not omitted:
        return None

    names = ", ".join(e.name for e in omitted)
    return ir.GeneratedRemainder(
        name=f"{classification.target_name}{ir.REMAINDER_SUFFIX}",
        source_name=classification.record_name,
        fields=tuple(_generated_field(e, ir.PresenceContainer.BARE) for e in omitted),
        capabilities=directive.capabilities,
        doc=f"Fields of `{classification.record_name}` omitted from "
        f"`{classification.target_name}`: {names}",
    )


def synthesize_operations(
    classification: ir.FieldClassification,
    projection: ir.GeneratedProjection,
    remainder: ir.GeneratedRemainder | None,
) -> ir.GeneratedOperations:
    """Describe the five operations for one projection/remainder pair."""
    record_name = classification.record_name
    target_name = projection.name
    remainder_type = remainder.name if remainder else ir.UNIT_TYPE
    split_returns = f"tuple[{target_name}, {remainder_type}]"

    def name(kind: ir.OperationKind) -> str:
        return operation_name(kind, record_name, target_name)

    reconstruct_params = _reconstruct_parameters(classification)
    full_param = ir.ParameterSpec(name="full", type=record_name, role=ir.ParameterRole.FULL)

    to_full = ir.OperationSpec(
        kind=ir.OperationKind.TO_FULL,
        name=name(ir.OperationKind.TO_FULL),
        owner=target_name,
        receiver=ir.Receiver.CONSUMED,
        parameters=reconstruct_params,
        returns=record_name,
        bindings=_reconstruct_bindings(classification, duplicate=False),
        doc="Converts this partial record into the full record by providing the omitted fields.",
    )

    to_full_cloned = ir.OperationSpec(
        kind=ir.OperationKind.TO_FULL_CLONED,
        name=name(ir.OperationKind.TO_FULL_CLONED),
        owner=target_name,
        receiver=ir.Receiver.BORROWED,
        parameters=reconstruct_params,
        returns=record_name,
        bindings=_reconstruct_bindings(classification, duplicate=True),
        requires=_duplicable_requirements(classification),
        doc=(
            "Creates a new full record by copying the fields from this partial record "
            "and providing the omitted fields.\n"
            "Requires that all included and optional fields can be deep-copied."
        ),
    )

    from_full = ir.OperationSpec(
        kind=ir.OperationKind.FROM_FULL,
        name=name(ir.OperationKind.FROM_FULL),
        owner=target_name,
        receiver=ir.Receiver.CLASS,
        parameters=(full_param,),
        returns=target_name,
        bindings=tuple(
            b for b in _split_bindings(classification) if b.target == ir.BindTarget.PROJECTION
        ),
        doc="Converts the full record into this partial record by projecting the included fields.",
    )

    from_full_with_remainder = ir.OperationSpec(
        kind=ir.OperationKind.FROM_FULL_WITH_REMAINDER,
        name=name(ir.OperationKind.FROM_FULL_WITH_REMAINDER),
        owner=target_name,
        receiver=ir.Receiver.CLASS,
        parameters=(full_param,),
        returns=split_returns,
        bindings=_split_bindings(classification),
        doc="Splits the full record into this partial record and its omitted fields.",
    )

    into_projection_with_remainder = ir.OperationSpec(
        kind=ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER,
        name=name(ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER),
        owner=record_name,
        receiver=ir.Receiver.CONSUMED,
        returns=split_returns,
        delegate=from_full_with_remainder.name,
        doc=f"Splits this record into `{target_name}` and its omitted fields.",
    )

    return ir.GeneratedOperations(
        to_full=to_full,
        to_full_cloned=to_full_cloned,
        from_full=from_full,
        from_full_with_remainder=from_full_with_remainder,
        into_projection_with_remainder=into_projection_with_remainder,
    )


def _generated_field(
    entry: ir.ClassifiedField,
    container: ir.PresenceContainer,
) -> ir.GeneratedField:
    return ir.GeneratedField(
        name=entry.name,
        type=entry.field.type,
        container=container,
        annotations=tuple(entry.field.annotations),
        field_class=entry.field_class,
    )


def _projection_doc(classification: ir.FieldClassification) -> str:
    record = classification.record_name
    omitted = [e.name for e in classification.entries if e.field_class == ir.FieldClass.OMITTED]
    optional = [e.name for e in classification.entries if e.field_class == ir.FieldClass.OPTIONAL]

    if omitted:
        doc = f"A partial version of `{record}` omitting the fields: {', '.join(omitted)}"
    else:
        doc = f"A partial version of `{record}` including all fields"
    if optional:
        doc += f"; optional fields: {', '.join(optional)}"
    return doc


def _reconstruct_parameters(classification: ir.FieldClassification) -> tuple[ir.ParameterSpec, ...]:
    """Omitted-field values first, then optional-field overrides, each in declaration order."""
    params = [
        ir.ParameterSpec(name=e.name, type=e.field.type, role=ir.ParameterRole.OMITTED)
        for e in classification.entries
        if e.field_class == ir.FieldClass.OMITTED
    ]
    params.extend(
        ir.ParameterSpec(
            name=e.name,
            type=f"{e.field.type} | None",
            role=ir.ParameterRole.OVERRIDE,
            default="None",
        )
        for e in classification.entries
        if e.field_class == ir.FieldClass.OPTIONAL
    )
    return tuple(params)


def _reconstruct_bindings(
    classification: ir.FieldClassification,
    duplicate: bool,
) -> tuple[ir.FieldBinding, ...]:
    """Full-record bindings in declaration order."""
    bindings = []
    for entry in classification.entries:
        if entry.field_class == ir.FieldClass.INCLUDED:
            binding = ir.FieldBinding(
                target=ir.BindTarget.FULL,
                field=entry.name,
                source=ir.ValueSource.SELF,
                duplicate=duplicate,
            )
        elif entry.field_class == ir.FieldClass.OMITTED:
            binding = ir.FieldBinding(
                target=ir.BindTarget.FULL,
                field=entry.name,
                source=ir.ValueSource.PARAMETER,
                parameter=entry.name,
            )
        else:
            binding = ir.FieldBinding(
                target=ir.BindTarget.FULL,
                field=entry.name,
                source=ir.ValueSource.SELF_OR_PARAMETER,
                parameter=entry.name,
                duplicate=duplicate,
            )
        bindings.append(binding)
    return tuple(bindings)


def _split_bindings(classification: ir.FieldClassification) -> tuple[ir.FieldBinding, ...]:
    """Route every field of a full record to the projection or the remainder."""
    bindings = []
    for entry in classification.entries:
        if entry.field_class == ir.FieldClass.OMITTED:
            target, source = ir.BindTarget.REMAINDER, ir.ValueSource.FULL
        elif entry.field_class == ir.FieldClass.OPTIONAL:
            target, source = ir.BindTarget.PROJECTION, ir.ValueSource.FULL_AS_PRESENT
        else:
            target, source = ir.BindTarget.PROJECTION, ir.ValueSource.FULL
        bindings.append(ir.FieldBinding(target=target, field=entry.name, source=source))
    return tuple(bindings)


def _duplicable_requirements(
    classification: ir.FieldClassification,
) -> tuple[ir.CapabilityRequirement, ...]:
    seen: list[str] = []
    for entry in classification.entries:
        if entry.field_class != ir.FieldClass.OMITTED and entry.field.type not in seen:
            seen.append(entry.field.type)
    return tuple(ir.CapabilityRequirement(type=t, capability=DUPLICABLE) for t in seen)
