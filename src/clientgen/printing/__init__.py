"""Code printers turning declaration graphs into source text."""
from ..graph import CompileUnit
from .typescript import KnockoutTypeScriptPrinter, TypeScriptPrinter


def render_json(unit: CompileUnit) -> str:
    """Serialize a declaration graph as indented JSON."""
    return unit.model_dump_json(indent=2) + "\n"


__all__ = [
    "TypeScriptPrinter",
    "KnockoutTypeScriptPrinter",
    "render_json",
]
