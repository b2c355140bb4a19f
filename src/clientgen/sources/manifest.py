"""Type source reading SourceType records from JSON or JSONL manifests."""
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from ..errors import TypeSourceError
from ..models import SourceType
from ..selectors import TypeSelector, should_keep_type
from ..storage import read_json, read_jsonl_typed, write_jsonl


class ManifestTypeSource:
    """Loads types from a manifest file.

    ``.jsonl`` manifests hold one SourceType record per line; any other
    extension is read as a JSON list of records. Records keep file order.
    """

    def fetch_types(self, module: Any, type_selectors: Sequence[TypeSelector] = ()) -> list[SourceType]:
        path = Path(module)
        if not path.is_file():
            raise TypeSourceError(f"Manifest not found: {path}")

        try:
            if path.suffix == ".jsonl":
                types = list(read_jsonl_typed(path, SourceType))
            else:
                data = read_json(path)
                if not isinstance(data, list):
                    raise TypeSourceError(f"{path.name} must contain a list of type records")
                types = [SourceType.model_validate(record) for record in data]
        except ValidationError as e:
            raise TypeSourceError(f"Invalid type record in {path.name}: {e}") from e
        except ValueError as e:
            raise TypeSourceError(f"Failed to parse {path.name}: {e}") from e

        return [t for t in types if should_keep_type(t, type_selectors)]


def save_manifest(path: Path, types: Sequence[SourceType]) -> None:
    """Write types to a JSONL manifest readable by ManifestTypeSource."""
    write_jsonl(path, list(types))
