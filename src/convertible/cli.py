"""
convertible command line.

Commands:
- generate: render declaration files into Python modules
- check: parse and validate declarations without generating
- inspect: show the parsed form of a declaration file
"""

from __future__ import annotations

import json
import logging
import os
import platform
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from convertible._version import __version__
from convertible.core import ir
from convertible.core.errors import (
    BackendError,
    ConfigError,
    ConflictError,
    ConvertibleError,
    ParseError,
)
from convertible.core.fileset import discover_declaration_files
from convertible.core.manifest import ProjectManifest, find_manifest, load_manifest
from convertible.core.parser import parse_files
from convertible.emit.runner import GenerationRunner

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

console = Console()


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"convertible {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


app = typer.Typer(
    help="""convertible - generate convertible error enums

Declarations list, per variant, the foreign types that convert into it:

  pub enum StorageError {
      (Serialization(JsonError), [(JsonError, Self.Serialization)]),
      (Unknown, [(OtherError, |_| Self.Unknown)]),
  }
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """convertible CLI main callback for global options."""
    configure_logging(verbose)


def _fail(prefix: str, error: Exception) -> typer.Exit:
    typer.echo(f"{prefix}: {error}", err=True)
    return typer.Exit(code=1)


def _error_prefix(error: ConvertibleError) -> str:
    if isinstance(error, ParseError):
        return "Parse error"
    if isinstance(error, ConflictError):
        return "Conflict"
    if isinstance(error, ConfigError):
        return "Config error"
    if isinstance(error, BackendError):
        return "Output error"
    return "Error"


def _load_manifest(config: Path | None) -> ProjectManifest:
    """Load the explicit config file, the nearest one, or defaults."""
    path = config or find_manifest(Path.cwd())
    if path is None:
        return ProjectManifest()
    return load_manifest(path)


def _resolve_files(files: list[Path] | None, manifest: ProjectManifest) -> list[Path]:
    if files:
        return list(files)

    discovered = discover_declaration_files(manifest.project_root, manifest)
    if not discovered:
        typer.echo("No declaration files given and none found in [sources] paths", err=True)
        raise typer.Exit(code=1)
    return discovered


@app.command()
def generate(
    files: list[Path] | None = typer.Argument(  # noqa: B008
        None, help="Declaration files (default: [sources] paths from config)"
    ),
    output: Path | None = typer.Option(  # noqa: B008
        None,
        "--output",
        "-o",
        help="Output directory (overrides convertible.toml)",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Path to convertible.toml"
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Parse and render without writing files",
    ),
) -> None:
    """
    Generate Python modules from declaration files.

    Without an output directory the generated source is printed to stdout.

    Examples:
        convertible generate errors.cvt                # Print to stdout
        convertible generate errors.cvt -o generated   # Write generated/errors.py
        convertible generate --dry-run                 # Check configured sources
    """
    try:
        manifest = _load_manifest(config)
        paths = _resolve_files(files, manifest)
        runner = GenerationRunner(manifest, output)
        run = runner.run(paths, dry_run=dry_run)
    except ConvertibleError as e:
        raise _fail(_error_prefix(e), e) from e

    for warning in run.result.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    if runner.output_dir is None:
        for module in run.modules:
            typer.echo(module.source, nl=False)
        return

    if dry_run:
        for module in run.modules:
            typer.echo(f"Would write {module.target}")
        typer.echo("No files were written (dry run mode)")
        return

    for path in run.result.files_created:
        typer.echo(f"Wrote {path}")
    typer.echo(
        typer.style(
            f"✓ Generated {run.enum_count} enum(s) in {len(run.result.files_created)} module(s)",
            fg=typer.colors.GREEN,
            bold=True,
        )
    )


@app.command()
def check(
    files: list[Path] | None = typer.Argument(  # noqa: B008
        None, help="Declaration files (default: [sources] paths from config)"
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Path to convertible.toml"
    ),
) -> None:
    """
    Parse and validate declaration files without generating code.
    """
    try:
        manifest = _load_manifest(config)
        parsed = parse_files(_resolve_files(files, manifest))
    except ConvertibleError as e:
        raise _fail(_error_prefix(e), e) from e

    for declarations in parsed:
        for enum in declarations.enums:
            typer.echo(
                f"OK: {enum.name} ({len(enum.variants)} variants, "
                f"{enum.conversion_count} conversions)"
            )


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="Declaration file"),  # noqa: B008
    format: str = typer.Option("text", "--format", "-f", help="Output format: 'text' or 'json'"),
) -> None:
    """
    Show the parsed enums, variants, and conversion rules of a file.
    """
    if format not in ("text", "json"):
        typer.echo(f"Unknown format: {format} (expected 'text' or 'json')", err=True)
        raise typer.Exit(code=1)

    try:
        (declarations,) = parse_files([file])
    except ConvertibleError as e:
        raise _fail(_error_prefix(e), e) from e

    if format == "json":
        typer.echo(json.dumps(declarations.model_dump(mode="json"), indent=2))
        return

    for enum in declarations.enums:
        visibility = enum.visibility_text or "private"
        console.print(f"[bold cyan]{enum.name}[/bold cyan] ({visibility})")

        table = Table(show_header=True, header_style="bold")
        table.add_column("Variant")
        table.add_column("Fields")
        table.add_column("Converts from")
        table.add_column("Converter")

        for variant in enum.variants:
            fields = "-" if variant.is_unit else f"({', '.join(variant.fields or [])})"
            if not variant.conversions:
                table.add_row(variant.name, fields, "", "")
                continue
            for index, rule in enumerate(variant.conversions):
                converter = rule.converter
                if isinstance(converter, ir.ImplicitConstruct):
                    how = f"{enum.name}.{converter.variant}"
                else:
                    how = converter.expr
                table.add_row(
                    variant.name if index == 0 else "",
                    fields if index == 0 else "",
                    rule.foreign_type,
                    how,
                )
        console.print(table)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
