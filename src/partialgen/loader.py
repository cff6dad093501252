"""
YAML schema loader.

Reads record definitions and their projection directives from schema files::

    module: accounts
    imports:
      - "from uuid import UUID"
    records:
      - name: User
        fields:
          - {name: id, type: UUID}
          - {name: name, type: str}
          - {name: email, type: str, annotations: ["'pii'"]}
        partial:
          - 'omit(id), optional(email)'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from partialgen.core import ir
from partialgen.core.errors import SchemaLoadError

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".yaml", ".yml")


class FieldEntry(BaseModel):
    name: str | None = None
    type: str
    annotations: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RecordEntry(BaseModel):
    name: str
    shape: ir.RecordShape = ir.RecordShape.NAMED
    doc: str | None = None
    fields: list[FieldEntry] = Field(default_factory=list)
    partial: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class SchemaDocument(BaseModel):
    module: str | None = None
    imports: list[str] = Field(default_factory=list)
    records: list[RecordEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


@dataclass
class LoadedRecord:
    """A source record together with its raw directive texts."""

    record: ir.SourceRecord
    directives: list[str] = field(default_factory=list)


@dataclass
class LoadedSchema:
    """Contents of one schema file."""

    path: Path
    module: str | None = None
    imports: list[str] = field(default_factory=list)
    records: list[LoadedRecord] = field(default_factory=list)

    def get_record(self, name: str) -> LoadedRecord | None:
        for loaded in self.records:
            if loaded.record.name == name:
                return loaded
        return None


def load_schema(path: Path) -> LoadedSchema:
    """
    Load a schema file.

    Args:
        path: Path to a YAML schema file

    Returns:
        LoadedSchema with records in file order

    Raises:
        SchemaLoadError: If the file is missing, is not valid YAML, or does
            not match the schema format
    """
    if not path.exists():
        raise SchemaLoadError(f"Schema not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        logger.warning(f"Empty schema file at {path}")
        return LoadedSchema(path=path)
    if not isinstance(data, dict):
        raise SchemaLoadError(f"Schema {path} must be a mapping with a 'records' key")

    try:
        document = SchemaDocument.model_validate(data)
        records = [
            LoadedRecord(
                record=ir.SourceRecord(
                    name=entry.name,
                    shape=entry.shape,
                    doc=entry.doc,
                    fields=[
                        ir.FieldSpec(name=f.name, type=f.type, annotations=f.annotations)
                        for f in entry.fields
                    ],
                ),
                directives=list(entry.partial),
            )
            for entry in document.records
        ]
    except ValidationError as e:
        raise SchemaLoadError(f"Invalid schema in {path}: {e}") from e

    logger.debug("Loaded %d record(s) from %s", len(records), path)
    return LoadedSchema(
        path=path,
        module=document.module,
        imports=list(document.imports),
        records=records,
    )


def discover_schemas(paths: list[Path]) -> list[Path]:
    """
    Expand files and directories into a sorted, de-duplicated list of schema files.

    Directories are searched recursively for ``*.yaml`` and ``*.yml``.
    """
    found: set[Path] = set()
    for path in paths:
        if path.is_dir():
            for suffix in SCHEMA_SUFFIXES:
                found.update(path.rglob(f"*{suffix}"))
        else:
            found.add(path)
    return sorted(found)
