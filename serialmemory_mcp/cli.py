"""SerialMemory MCP command line.

Usage:
    serialmemory-mcp                       # stdio + HTTP transports
    serialmemory-mcp --http-only           # HTTP transport only
    serialmemory-mcp --container           # bind all interfaces, no HTTPS listener
    serialmemory-mcp tools [--lazy]        # print the tool catalog
"""

import asyncio
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from serialmemory_mcp.catalog import ToolCatalog
from serialmemory_mcp.config import ConfigError, McpConfig
from serialmemory_mcp.log_config import get_logger

log = get_logger("cli")

app = typer.Typer(
    name="serialmemory-mcp",
    help="SerialMemory MCP adapter - stdio and HTTP transports for the SerialMemory API",
    rich_markup_mode="rich",
    add_completion=False,
)

# Diagnostics only: stdout carries the MCP protocol
err_console = Console(stderr=True)
console = Console()


def _serve(http_only: bool, container: bool) -> None:
    from serialmemory_mcp.server import run

    try:
        config = McpConfig.from_env(container_mode=container or None)
    except ConfigError as e:
        err_console.print(f"[bold red][MCP Error][/bold red] {e}")
        raise typer.Exit(code=1)

    try:
        asyncio.run(run(config, http_only=http_only))
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    http_only: bool = typer.Option(False, "--http-only", help="Serve HTTP only, without stdio"),
    container: bool = typer.Option(
        False, "--container", help="Bind all interfaces over plain HTTP (no HTTPS listener)"
    ),
) -> None:
    """Run the adapter when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        _serve(http_only, container)


@app.command()
def serve(
    http_only: bool = typer.Option(False, "--http-only", help="Serve HTTP only, without stdio"),
    container: bool = typer.Option(
        False, "--container", help="Bind all interfaces over plain HTTP (no HTTPS listener)"
    ),
) -> None:
    """Run the adapter."""
    _serve(http_only, container)


@app.command()
def tools(
    lazy: bool = typer.Option(False, "--lazy", help="Show the lazy listing instead of every tool"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only tools in this category"),
) -> None:
    """Print the tool catalog with backend routes."""
    catalog = ToolCatalog.default()

    if category is not None:
        if category.strip().lower() not in catalog.categories():
            err_console.print(
                f"[red]Unknown category:[/red] {category}. "
                f"Available: {', '.join(catalog.categories())}"
            )
            raise typer.Exit(code=1)
        listed = catalog.tools_for_category(category)
        title = catalog.categories()[category.strip().lower()].title
    elif lazy:
        listed = catalog.list_lazy()
        title = "Lazy tool listing"
    else:
        listed = catalog.list_all()
        title = "All tools"

    paths = {
        tool.name: f"{key}.{tool.name}"
        for key in catalog.categories()
        for tool in catalog.tools_for_category(key)
    }

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Tool", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Route")
    table.add_column("Hints", style="yellow")

    for tool in listed:
        route = catalog.resolve_route(tool.name)
        route_text = f"{route.verb.value} /api/{route.path}" if route else "(in-process)"
        hints = "read-only" if tool.read_only else "destructive" if tool.destructive else ""
        table.add_row(tool.name, paths.get(tool.name, ""), route_text, hints)

    console.print(table)
    console.print(f"[dim]{len(listed)} tools[/dim]")


if __name__ == "__main__":
    app()
