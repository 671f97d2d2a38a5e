"""CLI interface for Voice Hours."""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from voice_hours.config import get_settings

app = typer.Typer(
    name="voice-hours",
    help="Business hours and timezone tools for voice agents, served over MCP",
    no_args_is_help=True,
)
console = Console()


def _parse_args(pairs: list[str]) -> dict[str, str]:
    arguments = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--arg")
        arguments[key.strip()] = value.strip()
    return arguments


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Interface to bind (default from settings)"),
    port: int = typer.Option(None, "--port", "-p", help="Port to listen on (default from settings)"),
) -> None:
    """Start the MCP server (Streamable HTTP and SSE)."""
    from voice_hours.server import run

    settings = get_settings()
    overrides = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    console.print(
        Panel(
            "[bold blue]Voice Hours[/bold blue]\n"
            f"Streamable HTTP: http://{settings.host}:{settings.port}/mcp\n"
            f"SSE: http://{settings.host}:{settings.port}/legacy/sse\n"
            f"Holiday calendar: {settings.holiday_country or 'per postal code'}",
            title="Server Info",
        )
    )

    run(settings)


@app.command("tools")
def list_tools() -> None:
    """List the available tools."""
    from voice_hours.tools import get_default_registry

    table = Table(title="Tools")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in get_default_registry().list_tools():
        params = ", ".join(p.name if p.required else f"{p.name}?" for p in tool.parameters)
        table.add_row(tool.name, params, tool.description)

    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. checkBusinessHours"),
    arg: list[str] = typer.Option([], "--arg", "-a", help="Tool argument as key=value"),
    as_json: bool = typer.Option(False, "--json", help="Print the structured result as JSON"),
) -> None:
    """Call a tool once and print its answer."""
    from voice_hours.tools import get_default_registry

    output = asyncio.run(get_default_registry().execute(name, _parse_args(arg)))

    if as_json:
        console.print_json(json.dumps(output.to_dict(), default=str))
    elif output.is_error:
        console.print(f"[red]Error:[/red] {output.text}")
    else:
        console.print(output.text)

    if output.is_error:
        raise typer.Exit(1)


@app.command()
def hours(
    business_type: str = typer.Argument("dental", help="dental, medical or general"),
) -> None:
    """Show the weekly schedule for a business type."""
    from voice_hours.errors import ValidationError
    from voice_hours.hours import DAY_NAMES, get_schedule
    from voice_hours.voice import format_clock

    try:
        schedule = get_schedule(business_type)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"{business_type.lower()} hours")
    table.add_column("Day", style="bold")
    table.add_column("Open")
    table.add_column("Close")

    for name, day in zip(DAY_NAMES, schedule.days):
        if day.closed:
            table.add_row(name.capitalize(), "[dim]Closed[/dim]", "")
        else:
            table.add_row(name.capitalize(), format_clock(day.open), format_clock(day.close))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from voice_hours import __version__

    console.print(f"voice-hours version {__version__}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Voice Hours - business hours and timezone tools for voice agents."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    if verbose:
        console.print("[dim]Verbose mode enabled[/dim]")


if __name__ == "__main__":
    app()
