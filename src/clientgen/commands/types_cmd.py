"""List the types a module contributes to translation."""

import typer
from pathlib import Path
from typing import Optional

from ..config import load_config, load_env
from ..errors import ClientGenError
from ..translation import ClientGenerator, GeneratorOptions
from .generate import apply_cli_overrides, create_source, detect_source


def types(
    module: str = typer.Argument(..., help="Python module (dotted name or .py path) or .json/.jsonl manifest"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Type source: python or manifest"),
    namespaces: Optional[list[str]] = typer.Option(None, "--namespace", "-n", help="Only list types under this namespace"),
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory holding clientgen.json"),
    plain: bool = typer.Option(False, "--plain", "-p", help="Plain text output"),
) -> None:
    """Show the filtered types with their Readonly and Edit names.

    Example:
        clientgen types app/models.py
    """
    from rich.console import Console
    from rich.table import Table
    from rich import box

    console = Console(force_terminal=not plain, no_color=plain)

    load_env(base)
    try:
        config = apply_cli_overrides(load_config(base), namespaces, None, None)
        generator = ClientGenerator(create_source(source or detect_source(module)), GeneratorOptions.from_config(config))
        source_types = generator.load_types(module)
    except ClientGenError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not source_types:
        console.print("[yellow]No types found.[/yellow]")
        return

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Kind", style="cyan")
    table.add_column("Readonly name")
    table.add_column("Edit name")
    table.add_column("Members", justify="right")

    for source_type in source_types:
        names = generator.resolver.resolve(source_type)
        members = (
            len(source_type.properties) + len(source_type.fields)
            + len(source_type.methods) + len(source_type.enum_members)
        )
        table.add_row(source_type.kind.value, names.readonly_name, names.edit_name, str(members))

    console.print(table)
    console.print(f"[dim]{len(source_types)} types[/dim]")
