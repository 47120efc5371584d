"""Helpers shared by the CLI commands."""

from pathlib import Path

import typer
from rich.console import Console

from snippet_engine.models import EditResult

console = Console()
err_console = Console(stderr=True)


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        err_console.print(f"[red]Cannot read {path}: {exc.strerror}[/red]")
        raise typer.Exit(1) from exc


def fail(message: str) -> typer.Exit:
    err_console.print(f"[red]{message}[/red]")
    return typer.Exit(1)


def emit_edit(result: EditResult, path: Path, in_place: bool) -> None:
    """Print the edited source (or write it back) and report refusals."""
    if result.notice:
        err_console.print(f"[yellow]{result.notice}[/yellow]")
    if result.reason:
        raise fail(result.reason)
    if not result.changed:
        err_console.print("[yellow]No changes.[/yellow]")
        if not in_place:
            typer.echo(result.source, nl=False)
        return
    if in_place:
        path.write_text(result.source, encoding="utf-8")
        err_console.print(f"[green]Updated[/green] {path}")
        if result.inserted_at is not None:
            err_console.print(f"Inserted at {result.inserted_at.line}:{result.inserted_at.column}")
        return
    typer.echo(result.source, nl=False)
