"""
Deterministic names for generated operations.
"""

from __future__ import annotations

import re

from . import ir

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    """
    Convert a type name to snake_case.

    Examples:
        - User -> user
        - MultiOmit -> multi_omit
        - HTTPRequest -> http_request
    """
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.lower()


def operation_name(kind: ir.OperationKind, record_name: str, target_name: str) -> str:
    """
    Method name for one of the five generated operations.

    Args:
        kind: Operation kind
        record_name: Source record name
        target_name: Projection type name

    Returns:
        Method name, e.g. ``to_user`` or ``into_partial_user_with_omitted``
    """
    record = to_snake_case(record_name)
    match kind:
        case ir.OperationKind.TO_FULL:
            return f"to_{record}"
        case ir.OperationKind.TO_FULL_CLONED:
            return f"to_{record}_cloned"
        case ir.OperationKind.FROM_FULL:
            return f"from_{record}"
        case ir.OperationKind.FROM_FULL_WITH_REMAINDER:
            return f"from_{record}_with_omitted"
        case ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER:
            return f"into_{to_snake_case(target_name)}_with_omitted"
    raise ValueError(f"Unknown operation kind: {kind}")


def projection_method_names(record_name: str, target_name: str) -> list[str]:
    """Names of the operations defined on the projection type."""
    return [
        operation_name(kind, record_name, target_name)
        for kind in ir.OperationKind
        if kind != ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER
    ]
