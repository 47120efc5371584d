from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from snippet_engine.cli.common import console, read_source
from snippet_engine.core.files import extract_imports, scan


def files(
    path: Annotated[Path, typer.Argument(help="Snippet source file.")],
) -> None:
    """List the virtual files of a snippet and how expanded lines map back to them."""
    result = scan(read_source(path))

    table = Table(title="Files")
    table.add_column("name")
    table.add_column("lines", justify="right")
    table.add_row("(main)", str(len(result.main_source.splitlines())))
    for name in result.file_order:
        table.add_row(name, str(len(result.files.get(name, "").splitlines())))
    console.print(table)

    imports = extract_imports(result.main_source)
    if imports:
        console.print(f"Imports: {', '.join(imports)}")

    segments = Table(title="Line map")
    segments.add_column("expanded", justify="right")
    segments.add_column("file")
    segments.add_column("original", justify="right")
    segments.add_column("count", justify="right")
    for segment in result.line_map_segments:
        segments.add_row(
            str(segment.expanded_start_line),
            segment.file_name or "(main)",
            str(segment.original_start_line),
            str(segment.line_count),
        )
    console.print(segments)
