"""Command line interface for fetchproxy."""

import httpx
import typer
from rich.console import Console
from rich.table import Table

from .app import configure_logging
from .config import settings
from .exceptions import ProxyError
from .services import parse_options, parse_target_url

app = typer.Typer(help="fetchproxy - single-hop HTTP forwarding proxy")
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, "--host", help="Host to bind to"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Start the proxy server."""
    configure_logging("DEBUG" if debug else None, console=True if debug else None)

    import uvicorn

    console.print(f"[bold blue]Starting fetchproxy on {host}:{port}[/bold blue]")

    uvicorn.run(
        "fetchproxy.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if debug else settings.log_level.lower(),
    )


@app.command()
def config_check() -> None:
    """Show the effective configuration."""
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Debug", str(settings.debug))
    table.add_row("API Host", settings.api_host)
    table.add_row("API Port", str(settings.api_port))
    table.add_row(
        "Upstream Timeout",
        f"{settings.upstream_timeout}s" if settings.upstream_timeout else "None",
    )
    table.add_row("Max Redirects", str(settings.max_redirects))

    console.print(table)


@app.command()
def options(
    request_url: str = typer.Argument(..., help="Full proxy request URL"),
) -> None:
    """Show how a proxy request URL would be interpreted."""
    params: dict[str, str] = {}
    for key, value in httpx.URL(request_url).params.multi_items():
        params.setdefault(key, value)

    try:
        target = parse_target_url(params)
        parsed = parse_options(params)
    except ProxyError as e:
        console.print(f"[bold red]Error ({e.status_code}): {e.message}[/bold red]")
        raise typer.Exit(1)

    console.print(f"[bold blue]Target:[/bold blue] {target}")

    table = Table(title="Options")
    table.add_column("Option", style="cyan")
    table.add_column("Value", style="yellow")
    for name, value in parsed.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
