"""
Runtime projections for live Python classes.

Builds a :class:`SourceRecord` from an existing class, renders its
projections and executes the rendered source, so projection classes can be
created at import time::

    @partial("omit(id), optional(email)")
    @dataclass
    class User:
        id: int
        name: str
        email: str

    projection, remainder = User(1, "Ada", "a@x").into_partial_user_with_omitted()
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from collections.abc import Callable
from enum import Enum
from typing import Any, get_origin

from pydantic import BaseModel

from partialgen.core import ir
from partialgen.core.directive_parser import RawDirective
from partialgen.core.engine import generate
from partialgen.core.errors import ErrorContext, UnsupportedShapeError
from partialgen.render.python import PythonRenderer

logger = logging.getLogger(__name__)

PARTIALS_ATTR = "__partials__"


def record_from_class(cls: type) -> ir.SourceRecord:
    """
    Describe a class as a source record.

    Dataclasses and pydantic models are named-field records; NamedTuples are
    positional; Enums are variants; classes without annotated fields are
    unit records. Field types are kept as text and never evaluated.

    Args:
        cls: Class to describe

    Returns:
        SourceRecord (possibly of an unsupported shape; validation happens later)

    Raises:
        UnsupportedShapeError: If a dataclass field is excluded from __init__
    """
    name = cls.__name__
    doc = cls.__doc__ if cls.__doc__ and not dataclasses.is_dataclass(cls) else None

    if issubclass(cls, Enum):
        return ir.SourceRecord(name=name, shape=ir.RecordShape.VARIANT)

    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        annotations = getattr(cls, "__annotations__", {})
        return ir.SourceRecord(
            name=name,
            shape=ir.RecordShape.POSITIONAL,
            fields=[
                ir.FieldSpec(name=None, type=_type_text(annotations.get(f, "Any")))
                for f in cls._fields
            ],
        )

    if dataclasses.is_dataclass(cls):
        not_init = [f.name for f in dataclasses.fields(cls) if not f.init]
        if not_init:
            raise UnsupportedShapeError(
                f"Cannot project '{name}': field(s) {', '.join(not_init)} are declared "
                "with init=False and cannot be passed back to the constructor",
                ErrorContext(line=1, column=1, record=name),
            )
        fields = [
            ir.FieldSpec(name=f.name, type=_type_text(f.type)) for f in dataclasses.fields(cls)
        ]
    elif issubclass(cls, BaseModel):
        fields = [
            ir.FieldSpec(name=field_name, type=_type_text(info.annotation))
            for field_name, info in cls.model_fields.items()
        ]
    else:
        fields = [
            ir.FieldSpec(name=field_name, type=_type_text(annotation))
            for field_name, annotation in getattr(cls, "__annotations__", {}).items()
        ]

    shape = ir.RecordShape.NAMED if fields else ir.RecordShape.UNIT
    return ir.SourceRecord(name=name, shape=shape, fields=fields, doc=doc)


def materialize(cls: type, *directives: RawDirective) -> dict[str, type]:
    """
    Generate and execute the projections of ``cls``.

    The rendered module runs in a copy of the namespace of the module that
    defines ``cls``, so capability base classes and field types resolve as
    they would there. Each mirror split method is attached to ``cls``.

    Args:
        cls: Source record class
        *directives: Directive texts or token lists

    Returns:
        Generated classes by name, in generation order

    Raises:
        PartialGenError: If generation fails
    """
    record = record_from_class(cls)
    result = generate(record, directives)
    result.raise_for_diagnostics()

    source = PythonRenderer(header=False).render_module([result], include_records=False)
    module = sys.modules.get(cls.__module__)
    namespace: dict[str, Any] = dict(vars(module)) if module is not None else {}
    namespace["__name__"] = cls.__module__
    namespace[cls.__name__] = cls

    code = compile(source, f"<partialgen {cls.__module__}.{record.name}>", "exec")
    exec(code, namespace)

    generated: dict[str, type] = {}
    for output in result.outputs:
        projection_cls = namespace[output.projection.name]
        generated[output.projection.name] = projection_cls
        if output.remainder is not None:
            generated[output.remainder.name] = namespace[output.remainder.name]

        mirror = output.operations.into_projection_with_remainder
        setattr(cls, mirror.name, _mirror_method(projection_cls, mirror))

    logger.debug("Materialized %s for %s", ", ".join(generated), record.name)
    return generated


def partial(*directives: RawDirective, export: bool = True) -> Callable[[type], type]:
    """
    Class decorator generating projections at class-creation time.

    Generated classes are stored on the class under ``__partials__`` and,
    with ``export`` set, also published in the defining module so they can
    be imported next to the source class.

    Args:
        *directives: Directive texts, e.g. ``'"UserForm", omit(id)'``
        export: Publish generated classes as module attributes

    Raises:
        PartialGenError: If generation fails
    """

    def decorate(cls: type) -> type:
        generated = materialize(cls, *directives)
        setattr(cls, PARTIALS_ATTR, generated)
        if export:
            module = sys.modules.get(cls.__module__)
            if module is not None:
                for name, generated_cls in generated.items():
                    setattr(module, name, generated_cls)
        return cls

    return decorate


def projections_of(cls: type) -> dict[str, type]:
    """Classes generated for ``cls`` by :func:`partial`."""
    return dict(getattr(cls, PARTIALS_ATTR, {}))


def _mirror_method(projection_cls: type, op: ir.OperationSpec) -> Callable[[Any], Any]:
    split = getattr(projection_cls, str(op.delegate))

    def mirror(self: Any) -> Any:
        return split(self)

    mirror.__name__ = op.name
    mirror.__qualname__ = f"{op.owner}.{op.name}"
    mirror.__doc__ = op.doc
    return mirror


def _type_text(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type) and get_origin(annotation) is None:
        return annotation.__name__
    return repr(annotation).replace("typing.", "")
