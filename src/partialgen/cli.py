"""
partialgen command line interface.

Commands:
- generate: Render projection modules from schema files
- check: Verify rendered modules on disk are up to date (for CI)
- inspect: Show how each directive classifies a record's fields
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from partialgen._version import get_version
from partialgen.core import ir
from partialgen.core.engine import generate
from partialgen.core.errors import PartialGenError
from partialgen.loader import LoadedSchema, discover_schemas, load_schema
from partialgen.manifest import MANIFEST_NAME, ProjectManifest, load_manifest
from partialgen.render.python import PythonRenderer

logger = logging.getLogger(__name__)

app = typer.Typer(help="Generate projection types and conversions from record schemas")
console = Console()

_state: dict[str, bool] = {"verbose": False}


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"partialgen {get_version()}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """partialgen: projections of record types with lossless round-trips."""
    _state["verbose"] = verbose


def _configure(manifest_path: Path) -> ProjectManifest:
    """Load the manifest and set up logging from it and --verbose."""
    try:
        manifest = load_manifest(manifest_path)
    except PartialGenError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    level = logging.DEBUG if _state["verbose"] else manifest.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("partialgen").setLevel(level)
    return manifest


def _render_schema(schema: LoadedSchema, manifest: ProjectManifest) -> str:
    """Run every record of a schema through the engine and render the module."""
    results = []
    for loaded in schema.records:
        result = generate(loaded.record, loaded.directives)
        if not result.ok:
            for diagnostic in result.diagnostics:
                typer.echo(f"{schema.path}: {diagnostic.format()}", err=True)
            raise typer.Exit(code=1)
        results.append(result)

    renderer = PythonRenderer(header=manifest.render.header, source=schema.path.name)
    module_doc = f"Projections for {schema.module}." if schema.module else None
    try:
        return renderer.render_module(results, module_doc=module_doc, imports=schema.imports)
    except PartialGenError as e:
        typer.echo(f"{schema.path}: {e}", err=True)
        raise typer.Exit(code=1)


def _load_schemas(schemas: list[Path] | None, manifest: ProjectManifest) -> list[LoadedSchema]:
    paths = discover_schemas(schemas or manifest.schema_paths)
    if not paths:
        typer.echo("No schema files found.", err=True)
        raise typer.Exit(code=1)

    loaded = []
    for path in paths:
        try:
            loaded.append(load_schema(path))
        except PartialGenError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
    return loaded


def _plan_outputs(
    schemas: list[LoadedSchema],
    manifest: ProjectManifest,
    target_dir: Path,
) -> list[tuple[LoadedSchema, Path]]:
    """Pair each schema with its output module, refusing two schemas that share one."""
    planned: list[tuple[LoadedSchema, Path]] = []
    sources: dict[Path, Path] = {}
    for schema in schemas:
        out_path = manifest.output_path_for(schema.path, target_dir)
        if out_path in sources:
            typer.echo(
                f"Error: {schema.path} and {sources[out_path]} would both be written to {out_path}",
                err=True,
            )
            raise typer.Exit(code=1)
        sources[out_path] = schema.path
        planned.append((schema, out_path))
    return planned


@app.command("generate")
def generate_command(
    schemas: list[Path] | None = typer.Argument(None, help="Schema files or directories"),
    output_dir: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    manifest_path: Path = typer.Option(Path(MANIFEST_NAME), "--manifest", "-m", help="Project manifest"),
) -> None:
    """
    Render one projection module per schema file.
    """
    manifest = _configure(manifest_path)
    target_dir = output_dir or manifest.output_dir
    target_dir.mkdir(parents=True, exist_ok=True)

    planned = _plan_outputs(_load_schemas(schemas, manifest), manifest, target_dir)
    rendered = [(out_path, _render_schema(schema, manifest)) for schema, out_path in planned]
    for out_path, content in rendered:
        out_path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", out_path)
        typer.echo(f"Generated: {out_path}")


@app.command("check")
def check_command(
    schemas: list[Path] | None = typer.Argument(None, help="Schema files or directories"),
    output_dir: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    manifest_path: Path = typer.Option(Path(MANIFEST_NAME), "--manifest", "-m", help="Project manifest"),
) -> None:
    """
    Exit non-zero if any rendered module differs from what is on disk.
    """
    manifest = _configure(manifest_path)
    target_dir = output_dir or manifest.output_dir

    stale = []
    for schema, out_path in _plan_outputs(_load_schemas(schemas, manifest), manifest, target_dir):
        expected = _render_schema(schema, manifest)
        if not out_path.exists():
            stale.append(f"{out_path} (missing)")
        elif out_path.read_text(encoding="utf-8") != expected:
            stale.append(f"{out_path} (out of date)")

    if stale:
        typer.echo("Generated modules are stale:", err=True)
        for entry in stale:
            typer.echo(f"  - {entry}", err=True)
        typer.echo("Run 'partialgen generate' to update them.", err=True)
        raise typer.Exit(code=1)

    typer.echo("All generated modules are up to date.")


@app.command("inspect")
def inspect_command(
    schema_path: Path = typer.Argument(..., help="Schema file"),
    record_name: str | None = typer.Option(None, "--record", "-r", help="Only this record"),
    manifest_path: Path = typer.Option(Path(MANIFEST_NAME), "--manifest", "-m", help="Project manifest"),
) -> None:
    """
    Show the field classification of each directive.
    """
    _configure(manifest_path)
    try:
        schema = load_schema(schema_path)
    except PartialGenError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    records = schema.records
    if record_name:
        records = [r for r in records if r.record.name == record_name]
        if not records:
            typer.echo(f"Record '{record_name}' not found in {schema_path}", err=True)
            raise typer.Exit(code=1)

    failed = False
    for loaded in records:
        result = generate(loaded.record, loaded.directives)
        if not result.ok:
            failed = True
            for diagnostic in result.diagnostics:
                console.print(f"[red]{diagnostic.format()}[/red]")
            continue
        for output in result.outputs:
            console.print(_classification_table(loaded.record, output))

    if failed:
        raise typer.Exit(code=1)


def _classification_table(record: ir.SourceRecord, output: ir.ProjectionOutput) -> Table:
    title = f"{record.name} -> {output.projection.name}"
    if output.remainder is not None:
        title += f" + {output.remainder.name}"
    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Type")
    table.add_column("Class")

    styles = {
        ir.FieldClass.INCLUDED: "green",
        ir.FieldClass.OPTIONAL: "yellow",
        ir.FieldClass.OMITTED: "bright_black",
    }
    for entry in output.classification.entries:
        style = styles[entry.field_class]
        table.add_row(entry.name, entry.field.type, f"[{style}]{entry.field_class.value}[/{style}]")

    if output.projection.capabilities:
        table.caption = "capabilities: " + ", ".join(output.projection.capabilities)
    return table


if __name__ == "__main__":
    app()
