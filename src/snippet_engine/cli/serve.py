from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.", no_args_is_help=True)
console = Console()


@serve_app.command("api")
def api(
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Start the FastAPI REST API server."""
    import uvicorn

    from snippet_engine.api.app import create_app

    app = create_app()
    console.print(f"[green]Starting API server on {host}:{port}[/green]")
    uvicorn.run(app, host=host, port=port)


@serve_app.command("mcp")
def mcp(
    transport: Annotated[str, typer.Option(help="stdio, sse or streamable-http.")] = "stdio",
    host: str = "127.0.0.1",
    port: int = 8002,
) -> None:
    """Start the MCP tool server."""
    from snippet_engine.mcp.server import create_mcp_server

    server = create_mcp_server()
    if transport == "stdio":
        server.run(transport="stdio")
        return
    console.print(f"[green]Starting MCP server (transport: {transport}) on {host}:{port}[/green]")
    server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]
