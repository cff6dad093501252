"""Tests for version lookup."""

import tomllib
from pathlib import Path

import partialgen
from partialgen._version import get_version

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


class TestGetVersion:
    def test_matches_pyproject(self):
        with PYPROJECT.open("rb") as f:
            expected = tomllib.load(f)["project"]["version"]
        assert get_version() == expected

    def test_package_version(self):
        assert partialgen.__version__ == get_version()
