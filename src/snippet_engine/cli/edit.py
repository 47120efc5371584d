from pathlib import Path
from typing import Annotated, Any

import typer

from snippet_engine.cli.common import emit_edit, fail, read_source
from snippet_engine.core.exports import remove_component_export
from snippet_engine.core.insert_child import insert_child as _insert_child
from snippet_engine.core.layout import apply_translate
from snippet_engine.core.style import apply_style_update
from snippet_engine.errors import ParserLoadError
from snippet_engine.models import EditResult, StyleFields

edit_app = typer.Typer(help="Apply structural edits at a cursor position.", no_args_is_help=True)

PathArg = Annotated[Path, typer.Argument(help="Snippet source file.")]
LineOpt = Annotated[int, typer.Option(help="1-based line of the target element.")]
ColumnOpt = Annotated[int, typer.Option(help="1-based column of the target element.")]
InPlaceOpt = Annotated[bool, typer.Option("--in-place", "-i", help="Rewrite the file instead of printing.")]

# CLI spelling for "remove this property"
CLEAR = "none"


def _run(path: Path, in_place: bool, edit: Any) -> None:
    source = read_source(path)
    try:
        result: EditResult = edit(source)
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc
    emit_edit(result, path, in_place)


def _length(value: str) -> float | str | None:
    if value.lower() == CLEAR:
        return None
    try:
        return float(value)
    except ValueError:
        return value


@edit_app.command("insert-child")
def insert_child(
    path: PathArg,
    line: LineOpt,
    column: ColumnOpt,
    jsx: Annotated[str, typer.Option(help="JSX to insert as the last child.")],
    in_place: InPlaceOpt = False,
) -> None:
    """Insert JSX as the last child of the element at LINE:COLUMN."""
    _run(path, in_place, lambda source: _insert_child(source, line, column, jsx))


@edit_app.command("style")
def style(
    path: PathArg,
    line: LineOpt,
    column: ColumnOpt,
    background: Annotated[str | None, typer.Option(help="Background color ('none' clears).")] = None,
    border_width: Annotated[str | None, typer.Option(help="Border width in px ('none' clears).")] = None,
    border_color: Annotated[str | None, typer.Option(help="Border color ('none' clears).")] = None,
    radius: Annotated[str | None, typer.Option(help="Radius in px or a token like 'lg'.")] = None,
    text_color: Annotated[str | None, typer.Option(help="Text color ('none' clears).")] = None,
    font_size: Annotated[str | None, typer.Option(help="Font size in px or a token like 'sm'.")] = None,
    font_weight: Annotated[str | None, typer.Option(help="Font weight (100-900) or a token.")] = None,
    in_place: InPlaceOpt = False,
) -> None:
    """Set style properties on the element at LINE:COLUMN."""
    values: dict[str, Any] = {}
    for field, raw in (("background_color", background), ("border_color", border_color), ("text_color", text_color)):
        if raw is not None:
            values[field] = None if raw.lower() == CLEAR else raw
    for field, raw in (("border_radius", radius), ("font_size", font_size), ("font_weight", font_weight)):
        if raw is not None:
            values[field] = _length(raw)
    if border_width is not None:
        width = _length(border_width)
        if isinstance(width, str):
            raise fail(f"Invalid border width: {border_width}")
        values["border_width"] = width
    if not values:
        raise fail("Nothing to update: pass at least one style option.")

    fields = StyleFields(**values)
    _run(path, in_place, lambda source: apply_style_update(source, line, column, fields))


@edit_app.command("translate")
def translate(
    path: PathArg,
    line: LineOpt,
    column: ColumnOpt,
    dx: Annotated[float, typer.Option(help="Horizontal offset in px.")] = 0.0,
    dy: Annotated[float, typer.Option(help="Vertical offset in px.")] = 0.0,
    width: Annotated[float | None, typer.Option(help="Width in px.")] = None,
    height: Annotated[float | None, typer.Option(help="Height in px.")] = None,
    in_place: InPlaceOpt = False,
) -> None:
    """Move (and optionally resize) the element at LINE:COLUMN via its inline style."""
    _run(path, in_place, lambda source: apply_translate(source, line, column, dx, dy, width, height))


@edit_app.command("remove-export")
def remove_export(
    path: PathArg,
    name: Annotated[str, typer.Option(help="Named export to delete.")],
    in_place: InPlaceOpt = False,
) -> None:
    """Delete a named export (a whole statement, or one entry of a list)."""
    source = read_source(path)
    try:
        result = remove_component_export(source, name)
    except ParserLoadError as exc:
        raise fail(str(exc)) from exc
    emit_edit(EditResult(source=result.source, changed=result.removed, reason=result.reason), path, in_place)
