"""Tests for the YAML schema loader."""

from pathlib import Path

import pytest

from partialgen.core import ir
from partialgen.core.errors import SchemaLoadError
from partialgen.loader import discover_schemas, load_schema


class TestLoadSchema:
    def test_loads_records_in_order(self, schema_file: Path):
        schema = load_schema(schema_file)
        assert schema.module == "accounts"
        assert schema.imports == ["from decimal import Decimal"]
        assert [r.record.name for r in schema.records] == ["User", "Invoice"]

    def test_record_contents(self, schema_file: Path):
        user = load_schema(schema_file).get_record("User")
        assert user is not None
        assert user.record.doc == "A registered user."
        assert user.record.field_names == ["id", "name", "email"]
        assert user.record.get_field("email").annotations == ["'pii'"]
        assert user.directives == [
            "omit(id), optional(email)",
            '"UserSummary", derive(frozen), omit(email)',
        ]

    def test_record_without_directives(self, schema_file: Path):
        invoice = load_schema(schema_file).get_record("Invoice")
        assert invoice is not None
        assert invoice.directives == []
        assert invoice.record.shape == ir.RecordShape.NAMED

    def test_missing_record(self, schema_file: Path):
        assert load_schema(schema_file).get_record("Nope") is None

    def test_shape_and_unnamed_fields(self, tmp_path: Path):
        path = tmp_path / "pairs.yaml"
        path.write_text(
            "records:\n"
            "  - name: Pair\n"
            "    shape: positional\n"
            "    fields:\n"
            "      - {type: int}\n"
            "      - {type: str}\n"
        )
        record = load_schema(path).records[0].record
        assert record.shape == ir.RecordShape.POSITIONAL
        assert [f.name for f in record.fields] == [None, None]

    def test_empty_file(self, tmp_path: Path, caplog):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        schema = load_schema(path)
        assert schema.records == []
        assert "Empty schema file" in caplog.text


class TestLoadSchemaErrors:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SchemaLoadError, match="Schema not found"):
            load_schema(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("records: [unclosed\n")
        with pytest.raises(SchemaLoadError, match="Invalid YAML"):
            load_schema(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SchemaLoadError, match="must be a mapping"):
            load_schema(path)

    @pytest.mark.parametrize(
        "content",
        [
            "records:\n  - name: User\n    colour: red\n",
            "records:\n  - name: User\n    fields:\n      - {name: id}\n",
            "records:\n  - name: class\n",
            "records:\n  - name: User\n    shape: blob\n",
            "records:\n  - name: User\n    fields:\n      - {name: a, type: int}\n      - {name: a, type: int}\n",
        ],
    )
    def test_invalid_schema(self, tmp_path: Path, content: str):
        path = tmp_path / "invalid.yaml"
        path.write_text(content)
        with pytest.raises(SchemaLoadError, match="Invalid schema"):
            load_schema(path)


class TestDiscoverSchemas:
    def test_directory_search_is_recursive_and_sorted(self, tmp_path: Path):
        (tmp_path / "nested").mkdir()
        for name in ("b.yaml", "a.yml", "nested/c.yaml", "notes.txt"):
            (tmp_path / name).write_text("")
        found = discover_schemas([tmp_path])
        assert found == [tmp_path / "a.yml", tmp_path / "b.yaml", tmp_path / "nested" / "c.yaml"]

    def test_files_deduplicated(self, schema_file: Path):
        assert discover_schemas([schema_file, schema_file.parent]) == [schema_file]
