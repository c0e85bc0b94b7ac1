import typer
import json
import asyncio
from typing import Any, Awaitable, Callable, Optional, List
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.box import ROUNDED
from rich.markdown import Markdown
from rich.text import Text
from serve import serve_app
from uiregistry.core.config import config
from uiregistry.core.logging import setup_logging
from uiregistry.db.client import Database
from uiregistry.mcp_tools.server import create_mcp_server
from uiregistry.models.schemas import ComponentStatus, ComponentType
from uiregistry.services.query import DEFAULT_EXAMPLE_LIMIT, DEFAULT_SEARCH_LIMIT
from uiregistry.services.registry_service import RegistryService
from uiregistry.utils.formatting import format_item_examples

# Initialize Rich console for pretty output
console = Console()

# Create CLI app
app = typer.Typer(help="UI Component Registry CLI")

MCP_TRANSPORTS = ("stdio", "streamable-http")

STATUS_STYLES = {
    "stable": "green",
    "beta": "yellow",
    "alpha": "magenta",
    "deprecated": "red",
}


def get_service() -> RegistryService:
    """Registry service backed by the configured Supabase project."""
    return RegistryService(Database.from_config())


def run_with_spinner(message: str, call: Callable[[RegistryService], Awaitable[Any]]):
    """Run ``call(service)`` behind a transient spinner, printing a panel on failure."""
    with Progress(
        SpinnerColumn(),
        TextColumn(f"[bold green]{message}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("fetch", total=None)
        try:
            return asyncio.run(call(get_service()))
        except Exception as e:
            console.print(Panel(
                f"[bold red]Error:[/] {str(e)}",
                title="Registry Error",
                border_style="red"
            ))
            raise typer.Exit(code=1)


# Server commands
@app.command()
def start(
    host: str = typer.Option(config.http_host, help="Host to bind the server to"),
    port: int = typer.Option(config.http_port, help="Port to bind the server to"),
    reload: bool = typer.Option(False, help="Enable auto-reload")
):
    """Start the 🧩 UI Component Registry HTTP API server."""
    setup_logging()
    console.print(Panel(
        f"Starting registry server on [bold cyan]{host}:{port}[/] {'with auto-reload' if reload else ''}",
        title="🧩 Registry Server",
        border_style="green",
        expand=False
    ))

    serve_app(
        app="uiregistry.main:app",
        host=host,
        port=port,
        reload=reload,
        mcp_port=config.mcp_port,
    )


@app.command()
def mcp(
    transport: str = typer.Option("stdio", help="MCP transport: stdio or streamable-http"),
    port: int = typer.Option(config.mcp_port, help="Port for the streamable-http transport")
):
    """Run the MCP server exposing the registry tools."""
    if transport not in MCP_TRANSPORTS:
        console.print(f"[bold red]Unknown transport:[/] {transport} (choose from {', '.join(MCP_TRANSPORTS)})")
        raise typer.Exit(code=2)

    # stdout carries the stdio protocol, so logs go to stderr only
    setup_logging()
    server = create_mcp_server(get_service(), port=port)
    if transport != "stdio":
        console.print(Panel(
            f"MCP server listening on [bold cyan]http://{config.http_host}:{port}/mcp[/]",
            title="🧩 Registry MCP",
            border_style="green",
            expand=False
        ))
    server.run(transport=transport)


# Query commands
@app.command("registries")
def list_registries_cmd(
    registry: Optional[List[str]] = typer.Option(None, "--registry", "-r", help="Registry name or slug (repeatable)"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON")
):
    """List available registries."""
    setup_logging("WARNING")
    results = run_with_spinner("Fetching registries...", lambda service: service.search_all_registries(registry))

    if output_json:
        console.print_json(results.model_dump_json(by_alias=True))
        return

    if not results.items:
        console.print(Panel(
            "No registries found. Register your UI library first.",
            title="Empty Result",
            border_style="yellow"
        ))
        return

    table = Table(
        title="🧩 [bold]Registries[/]",
        box=ROUNDED,
        show_header=True,
        header_style="bold magenta",
        border_style="blue"
    )
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Slug", style="cyan")
    table.add_column("Framework")
    table.add_column("Components", justify="right")

    for item in results.items:
        table.add_row(
            str(item.id or ""),
            item.name,
            item.slug,
            item.framework,
            str(item.component_count),
        )

    console.print(table)


@app.command("search")
def search_components_cmd(
    query: Optional[str] = typer.Argument(None, help="Text matched against component name, description or slug"),
    registry: Optional[List[str]] = typer.Option(None, "--registry", "-r", help="Registry name or slug (repeatable)"),
    component_type: Optional[ComponentType] = typer.Option(None, "--type", help="Component type filter"),
    status: Optional[ComponentStatus] = typer.Option(None, help="Component status filter"),
    limit: int = typer.Option(DEFAULT_SEARCH_LIMIT, help="Maximum number of components", min=1),
    offset: int = typer.Option(0, help="Number of components to skip", min=0),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON")
):
    """Search components across registries."""
    setup_logging("WARNING")
    results = run_with_spinner(
        "Searching components...",
        lambda service: service.search_components(
            registry,
            query,
            limit=limit,
            offset=offset,
            type=component_type,
            status=status,
        ),
    )

    if output_json:
        console.print_json(results.model_dump_json(by_alias=True))
        return

    if not results.items:
        console.print(Panel(
            "No components found matching the criteria",
            title="Empty Result",
            border_style="yellow"
        ))
        return

    table = Table(
        title="🧩 [bold]Components[/]",
        box=ROUNDED,
        highlight=True,
        show_header=True,
        header_style="bold magenta",
        border_style="blue"
    )
    table.add_column("Add", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Type")
    table.add_column("Status", justify="center")
    table.add_column("Examples", justify="right")

    for item in results.items:
        table.add_row(
            item.add_command_argument,
            item.name,
            item.type,
            Text(item.status, style=STATUS_STYLES.get(item.status, "white")),
            str(item.example_count),
        )

    console.print(table)

    shown_to = results.offset + len(results.items)
    footer = Text()
    footer.append("Showing ", style="dim")
    footer.append(f"{results.offset + 1}-{shown_to}", style="bold cyan")
    footer.append(" of ", style="dim")
    footer.append(f"{results.total_count}", style="bold green")
    if results.has_more:
        footer.append(" • more available", style="dim")
    console.print(Panel(footer, box=ROUNDED, border_style="blue", expand=False))


@app.command("examples")
def examples_cmd(
    query: str = typer.Argument(..., help="Text matched against example name or slug"),
    registry: Optional[List[str]] = typer.Option(None, "--registry", "-r", help="Registry name or slug (repeatable)"),
    limit: int = typer.Option(DEFAULT_EXAMPLE_LIMIT, help="Maximum number of examples", min=1),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON")
):
    """Show usage examples grouped by component."""
    setup_logging("WARNING")
    items = run_with_spinner(
        f'Searching examples for "{query}"...',
        lambda service: service.get_item_examples(registry, query, limit=limit),
    )

    if output_json:
        console.print_json(json.dumps([item.model_dump(mode="json", by_alias=True) for item in items]))
        return

    console.print(Markdown(format_item_examples(items, query)))


if __name__ == "__main__":
    app()
