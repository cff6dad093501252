"""
Project manifest (partialgen.toml) loading.

The manifest says where schema files live, where rendered modules go, and
how the CLI renders and logs. Every section is optional.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from partialgen.core.errors import ManifestError

MANIFEST_NAME = "partialgen.toml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class OutputConfig:
    """Where rendered modules are written."""

    directory: str = "generated"
    suffix: str = "_partials"  # users.yaml -> users_partials.py


@dataclass
class RenderConfig:
    """Rendering options."""

    header: bool = True  # AUTO-GENERATED header with digest


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ProjectManifest:
    """Project configuration loaded from partialgen.toml."""

    name: str = "partialgen-project"
    schemas: list[str] = field(default_factory=lambda: ["schemas/"])
    output: OutputConfig = field(default_factory=OutputConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    root: Path = field(default_factory=Path.cwd)

    @property
    def schema_paths(self) -> list[Path]:
        return [self.root / p for p in self.schemas]

    @property
    def output_dir(self) -> Path:
        return self.root / self.output.directory

    def output_path_for(self, schema: Path, output_dir: Path | None = None) -> Path:
        """Rendered module path for a schema file."""
        return (output_dir or self.output_dir) / f"{schema.stem}{self.output.suffix}.py"

    @property
    def log_level(self) -> int:
        return int(getattr(logging, self.logging.level))


def load_manifest(path: Path) -> ProjectManifest:
    """
    Load partialgen.toml.

    A missing file yields the defaults rooted at the file's directory.

    Raises:
        ManifestError: If the file is not valid TOML or a value has the wrong type
    """
    root = path.parent
    if not path.exists():
        return ProjectManifest(root=root)

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    project = data.get("project", {})
    output_data = data.get("output", {})
    render_data = data.get("render", {})
    logging_data = data.get("logging", {})

    schemas = project.get("schemas", ["schemas/"])
    if not isinstance(schemas, list) or not all(isinstance(s, str) for s in schemas):
        raise ManifestError(f"[project] schemas must be a list of paths in {path}")

    output_config = OutputConfig(
        directory=_expect(output_data, "directory", str, "generated", path),
        suffix=_expect(output_data, "suffix", str, "_partials", path),
    )

    render_config = RenderConfig(
        header=_expect(render_data, "header", bool, True, path),
    )

    level = _expect(logging_data, "level", str, "WARNING", path).upper()
    if level not in LOG_LEVELS:
        raise ManifestError(
            f"[logging] level must be one of {', '.join(LOG_LEVELS)} in {path}, got {level!r}"
        )

    return ProjectManifest(
        name=_expect(project, "name", str, "partialgen-project", path),
        schemas=schemas,
        output=output_config,
        render=render_config,
        logging=LoggingConfig(level=level),
        root=root,
    )


def _expect(section: dict, key: str, kind: type, default: object, path: Path):  # type: ignore[no-untyped-def]
    value = section.get(key, default)
    if not isinstance(value, kind):
        raise ManifestError(f"'{key}' must be of type {kind.__name__} in {path}, got {value!r}")
    return value
