"""Type sources: where the reflectable types of a module come from."""
from typing import Any, Mapping, Protocol, Sequence

from ..errors import TypeSourceError
from ..models import SourceType
from ..selectors import TypeSelector, should_keep_type


class TypeSource(Protocol):
    """Yields a module's types in a stable order, without side effects."""

    def fetch_types(self, module: Any, type_selectors: Sequence[TypeSelector] = ()) -> list[SourceType]:
        ...


class StaticTypeSource:
    """Type source over prepared SourceType lists, keyed by module name."""

    def __init__(self, modules: Mapping[str, Sequence[SourceType]]):
        self.modules = {name: list(types) for name, types in modules.items()}

    def fetch_types(self, module: Any, type_selectors: Sequence[TypeSelector] = ()) -> list[SourceType]:
        if module not in self.modules:
            raise TypeSourceError(f"Unknown module: {module}")
        return [t for t in self.modules[module] if should_keep_type(t, type_selectors)]


from .manifest import ManifestTypeSource  # noqa: E402
from .python import PythonTypeSource  # noqa: E402

__all__ = [
    "TypeSource",
    "StaticTypeSource",
    "ManifestTypeSource",
    "PythonTypeSource",
]
