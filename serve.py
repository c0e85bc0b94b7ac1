"""Serve the UI component registry application using uvicorn."""

from typing import Union
import uvicorn
from fastapi import FastAPI
from rich.panel import Panel
from rich import box
from rich.console import Console

console = Console()


def serve_app(
    app: Union[str, FastAPI],
    *,
    host: str = "0.0.0.0",
    port: int = 3000,
    reload: bool = False,
    mcp_port: int = None,
    **kwargs,
):
    """
    Serve the registry HTTP API.

    Args:
        app: The FastAPI application or import string
        host: Host to bind the server to
        port: Port to bind the server to
        reload: Whether to enable auto-reload
        mcp_port: Port the MCP server listens on, shown for reference
        **kwargs: Additional arguments to pass to uvicorn.run
    """
    api_url = f"http://{host}:{port}"
    docs_url = f"{api_url}/docs"

    lines = [
        f"[bold green]API URL:[/bold green] {api_url}",
        f"[bold green]API Docs:[/bold green] [link={docs_url}]{docs_url}[/link]",
        f"[bold green]Health:[/bold green] {api_url}/health",
    ]
    if mcp_port:
        lines.append(f"[bold green]MCP:[/bold green] http://{host}:{mcp_port}/mcp")

    panel = Panel(
        "\n".join(lines),
        title="🧩 UI Component Registry API",
        expand=False,
        border_style="cyan",
        box=box.HEAVY,
        padding=(2, 2),
    )
    console.print(panel)

    uvicorn.run(app=app, host=host, port=port, reload=reload, **kwargs)
