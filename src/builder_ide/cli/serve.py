from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console()

RootOption = Annotated[Path | None, typer.Option("--root", help="Project root (defaults to BUILDER_IDE_ROOT or cwd).")]


@serve_app.command("api")
def api(
    host: str = "127.0.0.1",
    port: int = 8000,
    root: RootOption = None,
) -> None:
    """Start the FastAPI REST API server."""
    import uvicorn

    from builder_ide.api.app import create_app
    from builder_ide.api.dependencies import configure
    from builder_ide.config import get_settings

    settings = get_settings(root)
    configure(settings)
    app = create_app()
    console.print(f"[green]Starting API server on {host}:{port} for {settings.project_root}[/green]")
    uvicorn.run(app, host=host, port=port)


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    root: RootOption = None,
) -> None:
    """Start the MCP server."""
    from builder_ide.config import get_settings
    from builder_ide.core.workspace import ProjectWorkspace
    from builder_ide.mcp.server import create_mcp_server

    settings = get_settings(root)
    workspace = ProjectWorkspace(settings.project_root, settings.source_dir)
    server = create_mcp_server(workspace)
    # stdio carries the protocol on stdout
    Console(stderr=True).print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
