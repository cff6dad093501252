"""
Source record definitions for partialgen IR.

A source record is the already-parsed composite type that projections are
derived from. Field types and annotations are opaque strings: the engine
never interprets them, it only copies them into generated types.
"""

from __future__ import annotations

import keyword
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RecordShape(StrEnum):
    """Declaration shape of a source record."""

    NAMED = "named"  # class with named fields
    POSITIONAL = "positional"  # tuple-like, fields addressed by index
    UNIT = "unit"  # no fields at all
    VARIANT = "variant"  # enum / tagged union


class FieldSpec(BaseModel):
    """
    Definition of a single field of a source record.

    Attributes:
        name: Field identifier (None for positional fields)
        type: Type expression, kept verbatim (e.g. "int", "list[str]")
        annotations: Opaque metadata expressions copied onto generated fields
    """

    name: str | None
    type: str
    annotations: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Ensure named fields use a usable Python identifier."""
        if v is None:
            return v
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"Field name '{v}' is not a valid identifier")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field type must not be empty")
        return v.strip()


class SourceRecord(BaseModel):
    """
    A composite record type that projections are generated from.

    Attributes:
        name: Record type name
        shape: Declaration shape; only NAMED records can be projected
        fields: Fields in declaration order
        doc: Optional docstring carried onto the rendered record class
    """

    name: str
    shape: RecordShape = RecordShape.NAMED
    fields: list[FieldSpec] = Field(default_factory=list)
    doc: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"Record name '{v}' is not a valid identifier")
        return v

    @model_validator(mode="after")
    def validate_unique_field_names(self) -> SourceRecord:
        """Field names must be unique within a record."""
        seen: set[str] = set()
        for field in self.fields:
            if field.name is None:
                continue
            if field.name in seen:
                raise ValueError(f"Duplicate field '{field.name}' in record '{self.name}'")
            seen.add(field.name)
        return self

    @property
    def field_names(self) -> list[str]:
        """Names of named fields, in declaration order."""
        return [f.name for f in self.fields if f.name is not None]

    def get_field(self, name: str) -> FieldSpec | None:
        """Get field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None
