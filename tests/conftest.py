"""Shared pytest fixtures for partialgen tests."""

from pathlib import Path

import pytest

from partialgen.core import ir


@pytest.fixture
def user_record() -> ir.SourceRecord:
    """Return a four-field user record."""
    return ir.SourceRecord(
        name="User",
        fields=[
            ir.FieldSpec(name="id", type="int"),
            ir.FieldSpec(name="name", type="str"),
            ir.FieldSpec(name="email", type="str", annotations=["'pii'"]),
            ir.FieldSpec(name="tags", type="list[str]"),
        ],
    )


@pytest.fixture
def point_record() -> ir.SourceRecord:
    """Return a two-field point record."""
    return ir.SourceRecord(
        name="Point",
        fields=[
            ir.FieldSpec(name="x", type="float"),
            ir.FieldSpec(name="y", type="float"),
        ],
    )


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    """Create a schema file with two records."""
    path = tmp_path / "schemas" / "accounts.yaml"
    path.parent.mkdir()
    path.write_text(
        """
module: accounts
imports:
  - "from decimal import Decimal"
records:
  - name: User
    doc: A registered user.
    fields:
      - {name: id, type: int}
      - {name: name, type: str}
      - {name: email, type: str, annotations: ["'pii'"]}
    partial:
      - 'omit(id), optional(email)'
      - '"UserSummary", derive(frozen), omit(email)'
  - name: Invoice
    fields:
      - {name: number, type: str}
      - {name: total, type: Decimal}
""",
        encoding="utf-8",
    )
    return path
