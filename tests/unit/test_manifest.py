"""Tests for partialgen.toml loading."""

import logging
from pathlib import Path

import pytest

from partialgen.core.errors import ManifestError
from partialgen.manifest import load_manifest


class TestLoadManifest:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        manifest = load_manifest(tmp_path / "partialgen.toml")
        assert manifest.root == tmp_path
        assert manifest.schema_paths == [tmp_path / "schemas/"]
        assert manifest.output_dir == tmp_path / "generated"
        assert manifest.render.header is True
        assert manifest.log_level == logging.WARNING

    def test_full_manifest(self, tmp_path: Path):
        path = tmp_path / "partialgen.toml"
        path.write_text(
            """
[project]
name = "shop"
schemas = ["models/", "extra.yaml"]

[output]
directory = "src/shop/generated"
suffix = "_views"

[render]
header = false

[logging]
level = "debug"
"""
        )
        manifest = load_manifest(path)
        assert manifest.name == "shop"
        assert manifest.schema_paths == [tmp_path / "models/", tmp_path / "extra.yaml"]
        assert manifest.output_dir == tmp_path / "src/shop/generated"
        assert manifest.output_path_for(Path("models/users.yaml")) == (
            tmp_path / "src/shop/generated" / "users_views.py"
        )
        assert manifest.render.header is False
        assert manifest.log_level == logging.DEBUG

    def test_output_path_override(self, tmp_path: Path):
        manifest = load_manifest(tmp_path / "partialgen.toml")
        assert manifest.output_path_for(Path("a/users.yaml"), tmp_path / "out") == (
            tmp_path / "out" / "users_partials.py"
        )

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ("[project\n", "Invalid TOML"),
            ('[project]\nschemas = "schemas/"\n', "schemas must be a list"),
            ("[output]\ndirectory = 3\n", "'directory' must be of type str"),
            ('[render]\nheader = "yes"\n', "'header' must be of type bool"),
            ('[logging]\nlevel = "LOUD"\n', "level must be one of"),
        ],
    )
    def test_invalid_manifest(self, tmp_path: Path, content: str, message: str):
        path = tmp_path / "partialgen.toml"
        path.write_text(content)
        with pytest.raises(ManifestError, match=message):
            load_manifest(path)
