"""Configuration management commands for clientgen."""
import json

import typer
from pathlib import Path

from ..config import ConfigError, get_config_path, load_config, load_env, read_config_data, save_config
from ..models import ClientGenConfig
from ..storage import write_json

app = typer.Typer(help="Show or edit clientgen.json.")


@app.command("show")
def config_show(
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory"),
    plain: bool = typer.Option(False, "--plain", "-p", help="Plain text output"),
) -> None:
    """Show the effective configuration.

    Values come from clientgen.json, then CLIENTGEN_* environment
    variables. Settings that differ from the defaults are marked custom.

    Example:
        clientgen config show
    """
    from rich.console import Console
    from rich.table import Table
    from rich import box

    console = Console(force_terminal=not plain, no_color=plain)

    load_env(base)
    try:
        config = load_config(base)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    config_file = get_config_path(base)
    if config_file.exists():
        console.print(f"[dim]Config file: {config_file}[/dim]")
    else:
        console.print("[dim]No clientgen.json found, using defaults.[/dim]")
    console.print()

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Status", justify="center")

    defaults = ClientGenConfig().model_dump()
    for name, value in config.model_dump().items():
        status = "[dim]default[/dim]" if value == defaults.get(name) else "[green]custom[/green]"
        table.add_row(name, json.dumps(value), status)

    console.print(table)


@app.command("init")
def config_init(
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing clientgen.json"),
) -> None:
    """Create clientgen.json with default values."""
    config_file = get_config_path(base)
    if config_file.exists() and not force:
        typer.echo(f"Error: {config_file} already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(1)

    path = save_config(ClientGenConfig(), base)
    typer.echo(f"Created {path}")


@app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key to set"),
    value: str = typer.Argument(..., help="Value to set (JSON for lists, e.g. '[\"System\", \"NodaTime\"]')"),
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory"),
) -> None:
    """Set a configuration value.

    Examples:
        clientgen config set output_dir web/generated
        clientgen config set nullable_optional false
        clientgen config set namespaces '["App.Models"]'
    """
    if key not in ClientGenConfig.model_fields:
        typer.echo(f"Error: '{key}' is not a config key.", err=True)
        raise typer.Exit(1)

    config_file = get_config_path(base)
    try:
        data = read_config_data(config_file) if config_file.exists() else ClientGenConfig().model_dump()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    # Values that parse as JSON (true, 3, [..]) keep their type
    try:
        parsed_value = json.loads(value)
    except ValueError:
        parsed_value = value

    data[key] = parsed_value
    try:
        ClientGenConfig.model_validate(data)
    except ValueError as e:
        typer.echo(f"Error: invalid value for {key}: {e}", err=True)
        raise typer.Exit(1)

    write_json(config_file, data)
    typer.echo(f"Set {key} = {json.dumps(parsed_value)}")
