"""
Python source renderer for generated projections.

Renders generation results as a Python module of ``@dataclass`` classes:

1. Auto-generated header (generator version, source, content digest)
2. Imports (``from __future__ import annotations``, dataclass, copy, user imports)
3. Source record classes, each with one mirror split method per projection
4. Projection classes with their four conversion methods
5. Remainder classes

Output is deterministic: identical inputs give byte-identical text.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Sequence

from partialgen._version import get_version
from partialgen.core import ir
from partialgen.core.validator import validate_module_type_names

HEADER_START = "# === AUTO-GENERATED BY partialgen ==============================================="
HEADER_END = "# ================================================================================="
DIGEST_PATTERN = re.compile(r"^# Digest: ([0-9a-f]{64})$", re.MULTILINE)

INDENT = "    "

# Capability requests matching a dataclass() keyword become keyword arguments;
# anything else is treated as a base class name.
DATACLASS_OPTIONS = frozenset(
    {
        "eq",
        "order",
        "frozen",
        "unsafe_hash",
        "slots",
        "kw_only",
        "repr",
        "match_args",
    }
)


class PythonRenderer:
    """
    Render projection descriptions as Python source.

    Attributes:
        header: Emit the auto-generated header block
        source: Optional label of where the records came from (e.g. a file name)
    """

    def __init__(self, header: bool = True, source: str | None = None):
        self.header = header
        self.source = source

    def render_module(
        self,
        results: Sequence[ir.GenerationResult],
        module_doc: str | None = None,
        imports: Sequence[str] = (),
        include_records: bool = True,
    ) -> str:
        """
        Render a complete module.

        Args:
            results: Successful generation results, one per source record
            module_doc: Optional module docstring
            imports: Extra import lines needed by field types, emitted verbatim
            include_records: Also render the source record classes; when False
                the records must already exist in the module's namespace

        Returns:
            Module source text

        Raises:
            ValueError: If any result carries a diagnostic
            NameCollisionError: If two results define the same type name
        """
        failed = [r for r in results if not r.ok]
        if failed:
            raise ValueError(
                "Cannot render failed generation results: "
                + "; ".join(d.format() for r in failed for d in r.diagnostics)
            )
        validate_module_type_names(results, include_records)

        blocks: list[str] = []
        for result in results:
            if include_records:
                blocks.append(self.render_record(result.record, result.outputs))
            for output in result.outputs:
                blocks.append(self.render_projection(output))
                if output.remainder is not None:
                    blocks.append(self.render_remainder(output.remainder))

        body = self._render_preamble(module_doc, imports, _uses_annotated(results, include_records))
        if blocks:
            body += "\n\n" + "\n\n\n".join(blocks) + "\n"

        if not self.header:
            return body
        return self._render_header(body) + body

    def render_record(
        self,
        record: ir.SourceRecord,
        outputs: Sequence[ir.ProjectionOutput],
    ) -> str:
        """Render a source record class with its mirror split methods."""
        lines = ["@dataclass", f"class {record.name}:"]
        lines.extend(self._render_docstring(record.doc or f"Source record `{record.name}`."))
        lines.append("")
        for field in record.fields:
            if field.name is None:
                raise ValueError(f"Cannot render '{record.name}': positional fields have no name")
            lines.append(INDENT + self._field_line(field.name, field.type, field.annotations))

        for output in outputs:
            lines.append("")
            lines.extend(self.render_operation(output.operations.into_projection_with_remainder, output))

        return "\n".join(lines)

    def render_projection(self, output: ir.ProjectionOutput) -> str:
        """Render a projection class with its conversion methods."""
        projection = output.projection
        lines = self._render_class_head(projection.name, projection.capabilities)
        lines.extend(self._render_docstring(projection.doc))

        if projection.fields:
            lines.append("")
        for field in projection.fields:
            lines.append(INDENT + self._field_line(field.name, field.type_expr, field.annotations))

        for op in output.operations.owned_by(projection.name):
            lines.append("")
            lines.extend(self.render_operation(op, output))

        return "\n".join(lines)

    def render_remainder(self, remainder: ir.GeneratedRemainder) -> str:
        """Render a remainder class."""
        lines = self._render_class_head(remainder.name, remainder.capabilities)
        lines.extend(self._render_docstring(remainder.doc))
        lines.append("")
        for field in remainder.fields:
            lines.append(INDENT + self._field_line(field.name, field.type_expr, field.annotations))
        return "\n".join(lines)

    def render_operation(self, op: ir.OperationSpec, output: ir.ProjectionOutput) -> list[str]:
        """Render one generated method, indented for a class body."""
        lines: list[str] = []
        if op.receiver == ir.Receiver.CLASS:
            lines.append(INDENT + "@classmethod")
            receiver = "cls"
        else:
            receiver = "self"

        params = [receiver]
        for param in op.parameters:
            text = f"{param.name}: {param.type}"
            if param.default is not None:
                text += f" = {param.default}"
            params.append(text)

        lines.append(INDENT + f"def {op.name}({', '.join(params)}) -> {op.returns}:")
        lines.extend(INDENT + line for line in self._render_docstring(op.doc))

        body = self._render_operation_body(op, output)
        lines.extend(INDENT * 2 + line if line else "" for line in body)
        return lines

    # === Operation bodies ===

    def _render_operation_body(self, op: ir.OperationSpec, output: ir.ProjectionOutput) -> list[str]:
        match op.kind:
            case ir.OperationKind.TO_FULL | ir.OperationKind.TO_FULL_CLONED:
                return self._render_reconstruction(op)
            case ir.OperationKind.FROM_FULL:
                return [f"return cls({self._kwargs(op.bindings)})"]
            case ir.OperationKind.FROM_FULL_WITH_REMAINDER:
                projection = [b for b in op.bindings if b.target == ir.BindTarget.PROJECTION]
                remainder = [b for b in op.bindings if b.target == ir.BindTarget.REMAINDER]
                remainder_expr = (
                    f"{output.remainder_type}({self._kwargs(remainder)})"
                    if output.remainder is not None
                    else "None"
                )
                return [
                    f"projection = cls({self._kwargs(projection)})",
                    f"return projection, {remainder_expr}",
                ]
            case ir.OperationKind.INTO_PROJECTION_WITH_REMAINDER:
                return [f"return {output.projection.name}.{op.delegate}(self)"]
        raise ValueError(f"Unknown operation kind: {op.kind}")

    def _render_reconstruction(self, op: ir.OperationSpec) -> list[str]:
        """Build the full record in declaration order, resolving optional fields first."""
        lines: list[str] = []
        for binding in op.bindings:
            if binding.source != ir.ValueSource.SELF_OR_PARAMETER:
                continue
            value = self._copied(f"self.{binding.field}", binding.duplicate)
            lines.extend(
                [
                    f"if self.{binding.field} is not None:",
                    f"{INDENT}{binding.parameter} = {value}",
                    f"elif {binding.parameter} is None:",
                    f"{INDENT}raise ValueError(",
                    f'{INDENT * 2}"{op.owner}.{op.name}: optional field '
                    f"'{binding.field}' has no value and none was supplied\"",
                    f"{INDENT})",
                ]
            )
        lines.append(f"return {op.returns}({self._kwargs(op.bindings)})")
        return lines

    def _kwargs(self, bindings: Sequence[ir.FieldBinding]) -> str:
        return ", ".join(f"{b.field}={self._binding_value(b)}" for b in bindings)

    def _binding_value(self, binding: ir.FieldBinding) -> str:
        match binding.source:
            case ir.ValueSource.SELF:
                return self._copied(f"self.{binding.field}", binding.duplicate)
            case ir.ValueSource.PARAMETER | ir.ValueSource.SELF_OR_PARAMETER:
                return str(binding.parameter)
            case ir.ValueSource.FULL | ir.ValueSource.FULL_AS_PRESENT:
                return f"full.{binding.field}"
        raise ValueError(f"Unknown value source: {binding.source}")

    @staticmethod
    def _copied(expr: str, duplicate: bool) -> str:
        return f"_copy.deepcopy({expr})" if duplicate else expr

    # === Declarations ===

    def _render_class_head(self, name: str, capabilities: Sequence[str]) -> list[str]:
        options = [c for c in capabilities if c in DATACLASS_OPTIONS]
        bases = [c for c in capabilities if c not in DATACLASS_OPTIONS]

        decorator = "@dataclass"
        if options:
            decorator += "(" + ", ".join(f"{o}=True" for o in options) + ")"
        head = f"class {name}({', '.join(bases)}):" if bases else f"class {name}:"
        return [decorator, head]

    @staticmethod
    def _field_line(name: str, type_expr: str, annotations: Sequence[str]) -> str:
        if annotations:
            type_expr = f"Annotated[{type_expr}, {', '.join(annotations)}]"
        return f"{name}: {type_expr}"

    @staticmethod
    def _render_docstring(doc: str) -> list[str]:
        doc = doc.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        doc_lines = doc.splitlines() or [""]
        if len(doc_lines) == 1:
            return [f'{INDENT}"""{doc_lines[0]}"""']
        return [f'{INDENT}"""{doc_lines[0]}', *(INDENT + line for line in doc_lines[1:]), f'{INDENT}"""']

    # === Module framing ===

    def _render_preamble(
        self,
        module_doc: str | None,
        imports: Sequence[str],
        uses_annotated: bool,
    ) -> str:
        lines: list[str] = []
        if module_doc:
            lines.append(f'"""{module_doc}"""')
            lines.append("")

        lines.append("from __future__ import annotations")
        lines.append("")
        lines.append("import copy as _copy")
        lines.append("from dataclasses import dataclass")
        if uses_annotated:
            lines.append("from typing import Annotated")

        if imports:
            lines.append("")
            lines.extend(imports)

        return "\n".join(lines) + "\n"

    def _render_header(self, body: str) -> str:
        lines = [
            HEADER_START,
            f"# Generator: partialgen {get_version()}",
        ]
        if self.source:
            lines.append(f"# Source: {self.source}")
        lines.append(f"# Digest: {content_digest(body)}")
        lines.append("# Do not edit: regenerate with `partialgen generate`.")
        lines.append(HEADER_END)
        return "\n".join(lines) + "\n"


def _uses_annotated(results: Sequence[ir.GenerationResult], include_records: bool) -> bool:
    for result in results:
        if include_records and any(f.annotations for f in result.record.fields):
            return True
        for output in result.outputs:
            if any(f.annotations for f in output.projection.fields):
                return True
            if output.remainder and any(f.annotations for f in output.remainder.fields):
                return True
    return False


def content_digest(body: str) -> str:
    """SHA-256 of rendered module text, excluding the header."""
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def read_digest(content: str) -> str | None:
    """Extract the recorded digest from a previously rendered module."""
    match = DIGEST_PATTERN.search(content)
    return match.group(1) if match else None


def render_results(
    results: Sequence[ir.GenerationResult],
    header: bool = True,
    source: str | None = None,
    module_doc: str | None = None,
    imports: Sequence[str] = (),
) -> str:
    """
    Convenience function to render results as a standalone module.

    Args:
        results: Successful generation results
        header: Emit the auto-generated header block
        source: Label of where the records came from
        module_doc: Optional module docstring
        imports: Extra import lines for field types

    Returns:
        Module source text
    """
    renderer = PythonRenderer(header=header, source=source)
    return renderer.render_module(results, module_doc=module_doc, imports=imports)
