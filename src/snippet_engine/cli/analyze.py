import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from snippet_engine.cli.common import console, err_console, fail, read_source
from snippet_engine.core.analyze import analyze as _analyze
from snippet_engine.core.props import describe_prop
from snippet_engine.errors import ParserLoadError
from snippet_engine.models import AnalyzeResult


def _render(result: AnalyzeResult) -> None:
    exports = Table(title="Exports")
    exports.add_column("export")
    exports.add_column("label")
    for entry in result.exports:
        exports.add_row(entry.export_name, entry.label)
    console.print(exports)

    props = Table(title="Props")
    props.add_column("key")
    props.add_column("label")
    props.add_column("type")
    props.add_column("default")
    for definition in result.props_schema.props:
        default = result.default_props.get(definition.key)
        props.add_row(
            definition.key,
            definition.label,
            describe_prop(definition),
            json.dumps(default) if definition.key in result.default_props else "",
        )
    console.print(props)

    if result.duplicate_keys:
        console.print(f"[yellow]Props shared by several exports:[/yellow] {', '.join(result.duplicate_keys)}")
    for issue in result.security_issues:
        console.print(f"[red]{issue.line}:{issue.column}[/red] {issue.message}")
    if result.tailwind_error:
        console.print(f"[yellow]Tailwind:[/yellow] {result.tailwind_error}")
    elif result.tailwind_css is not None:
        console.print(f"Tailwind CSS: {len(result.tailwind_css)} chars")
    console.print(f"Source hash: {result.source_hash:#010x}")


def analyze(
    path: Annotated[Path, typer.Argument(help="Snippet source file.")],
    no_tailwind: Annotated[bool, typer.Option("--no-tailwind", help="Skip Tailwind compilation.")] = False,
    no_inspect: Annotated[bool, typer.Option("--no-inspect", help="Skip the inspect index.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full result as JSON.")] = False,
) -> None:
    """Analyze a snippet: exports, props, security issues and Tailwind CSS."""
    source = read_source(path)
    try:
        result = asyncio.run(_analyze(source, include_tailwind=not no_tailwind, include_inspect=not no_inspect))
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc

    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
        return
    if result.parse_error:
        err_console.print(f"[red]{result.parse_error}[/red]")
        raise typer.Exit(1)
    _render(result)
