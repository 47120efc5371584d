import typer

from snippet_engine.cli.analyze import analyze
from snippet_engine.cli.edit import edit_app
from snippet_engine.cli.files import files
from snippet_engine.cli.inspect import inspect, style, tree
from snippet_engine.cli.serve import serve_app

app = typer.Typer(
    name="snippet-engine",
    help="Snippet engine CLI: analyze and edit TSX component snippets.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("analyze")(analyze)
app.command("files")(files)
app.command("inspect")(inspect)
app.command("style")(style)
app.command("tree")(tree)
app.add_typer(edit_app, name="edit")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
