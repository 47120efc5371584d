from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from snippet_engine.cli.common import console, fail, read_source
from snippet_engine.core.component_tree import build_component_tree
from snippet_engine.core.inspect import InspectLookup, build_inspect_index
from snippet_engine.core.style_read import read_style
from snippet_engine.errors import ParserLoadError
from snippet_engine.models import ComponentTreeNode, TextRange


def _span(text_range: TextRange) -> str:
    return f"{text_range.start_line}:{text_range.start_column}-{text_range.end_line}:{text_range.end_column}"


def inspect(
    path: Annotated[Path, typer.Argument(help="Snippet source file.")],
    line: Annotated[int | None, typer.Option(help="Find the element at this 1-based line.")] = None,
    column: Annotated[int, typer.Option(help="1-based column used with --line.")] = 1,
) -> None:
    """Print the inspect index, or the element at --line/--column."""
    try:
        index = build_inspect_index(read_source(path))
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc
    if index is None:
        raise fail("Unable to build the inspect index.")

    if line is not None:
        match = InspectLookup(index).find_match(line, column)
        if match is None:
            raise fail(f"No JSX element at {line}:{column}.")
        console.print(f"<{match.element_name or ''}> {match.element_type} {_span(match.range)}")
        for text_range in match.text_ranges:
            console.print(f"  text {_span(text_range)}")
        return

    table = Table()
    table.add_column("element")
    table.add_column("type")
    table.add_column("range")
    table.add_column("text", justify="right")
    for entry in index.elements:
        table.add_row(
            entry.element_name or "", entry.element_type, _span(entry.element_range), str(len(entry.text_ranges))
        )
    console.print(table)
    console.print(f"({len(index.elements)} elements)")


def style(
    path: Annotated[Path, typer.Argument(help="Snippet source file.")],
    line: Annotated[int, typer.Option(help="1-based line of the target element.")],
    column: Annotated[int, typer.Option(help="1-based column of the target element.")],
) -> None:
    """Print the style fields of the element at --line/--column."""
    try:
        state = read_style(read_source(path), line, column)
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc
    if not state.found:
        raise fail(state.reason or f"No JSX element at {line}:{column}.")

    console.print(f"<{state.element_name or ''}> className: {state.class_name_kind}")
    if state.reason:
        console.print(f"[yellow]{state.reason}[/yellow]")
    table = Table()
    table.add_column("field")
    table.add_column("present")
    table.add_column("value")
    for field, prop in state.properties:
        value = "" if prop.value is None else str(prop.value)
        table.add_row(field, "yes" if prop.present else "no", escape(value))
    console.print(table)


def _add_branch(parent: Tree, node: ComponentTreeNode) -> None:
    label = f"[bold]{escape(node.name)}[/bold]"
    if node.class_name:
        label += f' [dim]"{escape(node.class_name)}"[/dim]'
    if node.source is not None:
        label += f" {node.source.line}:{node.source.column}"
    branch = parent.add(label)
    for child in node.children:
        _add_branch(branch, child)


def tree(
    path: Annotated[Path, typer.Argument(help="Snippet source file.")],
    export: Annotated[str | None, typer.Option("--export", help="Named export (default export if omitted).")] = None,
) -> None:
    """Print the element tree an export renders."""
    try:
        roots = build_component_tree(read_source(path), export)
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc
    if not roots:
        raise fail("No JSX found for the requested export.")
    top = Tree(export or "default")
    for root in roots:
        _add_branch(top, root)
    console.print(top)
