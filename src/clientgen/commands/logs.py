"""Command log inspection for clientgen."""

import typer
from pathlib import Path
from rich.console import Console

from ..logging import parse_log_file

app = typer.Typer(help="Inspect the clientgen command log.")
console = Console()


@app.command("show")
def logs_show(
    lines: int = typer.Option(20, "--lines", "-n", help="Number of recent entries to show"),
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory"),
) -> None:
    """Show recent command invocations."""
    entries = parse_log_file(base)

    if not entries:
        console.print("[yellow]No log entries found.[/yellow]")
        return

    for entry in entries[-lines:]:
        ts = entry["timestamp"][:19]  # Trim microseconds
        if entry["command"] == "generate":
            console.print(f"[bold blue]{ts}[/] [green]{entry['command']}[/] {entry['args']}")
        else:
            console.print(f"[dim]{ts}[/] {entry['command']} {entry['args']}")
