"""CLI entry point: check, list, inline, export."""

import logging
from pathlib import Path
from typing import Optional

import typer

from tsbind import __version__
from tsbind.config import ExportConfiguration, load_config, parse_bigint
from tsbind.errors import Io, TsExportError
from tsbind.ir import TypeRegistry
from tsbind.schema import load_schema
from tsbind.typescript import export_datatype, inline

app = typer.Typer(
    name="tsbind",
    help="Generate TypeScript type declarations from a type schema.",
)


def _load_registry(path: Path) -> TypeRegistry:
    if not path.exists():
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return load_schema(path)
    except OSError as e:
        typer.echo(str(Io(e)), err=True)
        raise typer.Exit(1)
    except TsExportError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


def _build_config(
    config_path: Optional[Path],
    bigint: Optional[str],
    no_comments: bool,
    export_by_default: Optional[bool],
) -> ExportConfiguration:
    try:
        conf = load_config(config_path) if config_path else ExportConfiguration()
        if bigint:
            conf = conf.with_bigint(parse_bigint(bigint))
    except OSError as e:
        typer.echo(str(Io(e)), err=True)
        raise typer.Exit(1)
    except TsExportError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    if no_comments:
        conf = conf.with_comment_style(None)
    if export_by_default is not None:
        conf = conf.with_export_by_default(export_by_default)
    return conf


@app.command("check")
def check_cmd(file: Path = typer.Argument(..., help="Schema file (.yaml or .json)")):
    """Load and validate the schema."""
    _load_registry(file)
    typer.echo("OK")


@app.command("list")
def list_cmd(file: Path = typer.Argument(..., help="Schema file (.yaml or .json)")):
    """List the types defined by the schema."""
    registry = _load_registry(file)
    for name in registry.names():
        typer.echo(name)


@app.command("inline")
def inline_cmd(
    file: Path = typer.Argument(..., help="Schema file (.yaml or .json)"),
    name: str = typer.Argument(..., help="Type to render"),
    bigint: Optional[str] = typer.Option(None, "--bigint", help="string, number, bigint or fail"),
):
    """Print the TypeScript expression for one type, without a declaration."""
    registry = _load_registry(file)
    named = registry.get(name)
    if named is None:
        typer.echo(f"Error: no type named {name!r}", err=True)
        raise typer.Exit(1)
    conf = _build_config(None, bigint, False, None)
    try:
        typer.echo(inline(conf, named.inner))
    except TsExportError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command("export")
def export_cmd(
    file: Path = typer.Argument(..., help="Schema file (.yaml or .json)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write declarations here instead of stdout"),
    bigint: Optional[str] = typer.Option(None, "--bigint", help="string, number, bigint or fail"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML export configuration"),
    no_comments: bool = typer.Option(False, "--no-comments", help="Do not emit doc comments"),
    export_by_default: Optional[bool] = typer.Option(
        None, "--export-by-default/--no-export-by-default", help="Export types without an explicit export flag"
    ),
):
    """Export every selected type as an `export type` declaration."""
    registry = _load_registry(file)
    conf = _build_config(config, bigint, no_comments, export_by_default)

    declarations = []
    failed = 0
    for named in registry:
        if not conf.should_export(named.export):
            continue
        try:
            declarations.append(export_datatype(conf, named))
        except TsExportError as e:
            failed += 1
            typer.echo(str(e), err=True)

    text = "\n\n".join(declarations)
    if output is None:
        if text:
            typer.echo(text)
    else:
        try:
            output.write_text(text + "\n" if text else "")
        except OSError as e:
            typer.echo(str(Io(e)), err=True)
            raise typer.Exit(1)
        typer.echo(f"Wrote {len(declarations)} declarations to {output}")
    if failed:
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """tsbind: TypeScript bindings from language-neutral type schemas."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def version_cmd():
    """Print the tsbind version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
