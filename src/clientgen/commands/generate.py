"""Generate TypeScript client models for a module."""

import typer
from pathlib import Path
from typing import Optional

from ..config import TYPESCRIPT_DIR, ConfigError, load_config, load_env
from ..errors import ClientGenError
from ..graph import CompileUnit
from ..logging import configure_logging
from ..models import ClientGenConfig
from ..printing import KnockoutTypeScriptPrinter, TypeScriptPrinter, render_json
from ..sources import ManifestTypeSource, PythonTypeSource, TypeSource
from ..storage import write_text_files
from ..translation import GeneratorOptions, generate_views

SOURCES = {
    "python": PythonTypeSource,
    "manifest": ManifestTypeSource,
}
FORMATS = ("ts", "json")
MANIFEST_SUFFIXES = (".json", ".jsonl")


def detect_source(module: str) -> str:
    """Manifest files are recognized by extension; anything else is Python."""
    return "manifest" if Path(module).suffix in MANIFEST_SUFFIXES else "python"


def output_name(module: str) -> str:
    """Base file name for a module handle (``app/models.py`` -> ``models``)."""
    path = Path(module)
    if path.suffix in (".py",) + MANIFEST_SUFFIXES:
        return path.stem
    return module.rpartition(".")[2]


def create_source(name: str) -> TypeSource:
    if name not in SOURCES:
        raise typer.BadParameter(f"Unknown type source '{name}'. Choose from: {', '.join(SOURCES)}")
    return SOURCES[name]()


def apply_cli_overrides(
    config: ClientGenConfig,
    namespaces: Optional[list[str]],
    include: Optional[list[str]],
    optional: Optional[list[str]],
) -> ClientGenConfig:
    """CLI options take precedence over clientgen.json and the environment."""
    updates: dict = {}
    if namespaces:
        updates["namespaces"] = namespaces
    if include:
        updates["include_properties"] = include
    if optional:
        updates["optional_properties"] = optional
    return config.model_copy(update=updates) if updates else config


def render_outputs(
    dto: CompileUnit,
    edit: CompileUnit,
    out_dir: Path,
    name: str,
    output_format: str = "ts",
) -> dict[Path, str]:
    """Render both views to file contents keyed by destination path.

    Args:
        dto: Readonly (DTO) declaration graph.
        edit: Edit declaration graph.
        out_dir: Output root directory.
        name: Base file name.
        output_format: "ts" for TypeScript sources, "json" for the raw graphs.

    Returns:
        Mapping of path to content; nothing is written here.
    """
    if output_format == "json":
        return {
            out_dir / f"{name}.dto.json": render_json(dto),
            out_dir / f"{name}.edit.json": render_json(edit),
        }

    ts_dir = out_dir / TYPESCRIPT_DIR
    dto_file = f"{name}.d.ts"
    return {
        ts_dir / dto_file: TypeScriptPrinter(ambient=True).render(dto),
        ts_dir / f"{name}.ts": KnockoutTypeScriptPrinter().render(edit, references=[dto_file], declared=dto),
    }


def generate(
    module: str = typer.Argument(..., help="Python module (dotted name or .py path) or .json/.jsonl manifest"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory (default: output_dir from clientgen.json)"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Type source: python or manifest (default: by extension)"),
    namespaces: Optional[list[str]] = typer.Option(None, "--namespace", "-n", help="Only translate types under this namespace (repeatable)"),
    include: Optional[list[str]] = typer.Option(None, "--include", help="Property glob to include, e.g. 'Customer.*' (repeatable)"),
    optional: Optional[list[str]] = typer.Option(None, "--optional", help="Property glob to mark optional (repeatable)"),
    output_format: str = typer.Option("ts", "--format", "-f", help="Output format: ts or json"),
    base: Path = typer.Option(Path("."), "--base", "-b", help="Project directory holding clientgen.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show translation notices"),
) -> None:
    """Generate DTO interfaces and Knockout Edit classes for a module.

    Writes <out>/TypeScript/<name>.d.ts (read-only DTOs) and
    <out>/TypeScript/<name>.ts (Edit classes). Both files are rendered
    before either is written.

    Example:
        clientgen generate app/models.py --out web
        clientgen generate types.jsonl -n App.Models --optional '*.notes'
    """
    from rich.console import Console

    console = Console()
    configure_logging(verbose)

    if output_format not in FORMATS:
        console.print(f"[red]Error:[/red] Unknown format '{output_format}'. Choose from: {', '.join(FORMATS)}")
        raise typer.Exit(1)

    load_env(base)
    try:
        config = load_config(base)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    config = apply_cli_overrides(config, namespaces, include, optional)
    type_source = create_source(source or detect_source(module))
    out_dir = out if out is not None else base / config.output_dir

    try:
        dto, edit = generate_views(module, type_source, GeneratorOptions.from_config(config))
        files = render_outputs(dto, edit, out_dir, output_name(module), output_format)
    except ClientGenError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    write_text_files(files)

    declared = sum(len(ns.declarations) for ns in dto.namespaces)
    console.print(f"Generated {declared} types from [cyan]{module}[/cyan]")
    for path in files:
        console.print(f"  [green]wrote[/green] {path}")
