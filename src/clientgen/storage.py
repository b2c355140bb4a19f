"""Storage utilities for JSONL and JSON files."""

import json
from pathlib import Path
from typing import Generator, TypeVar, Type
from pydantic import BaseModel


T = TypeVar('T', bound=BaseModel)


def read_jsonl(path: Path) -> Generator[dict, None, None]:
    """Read records from a JSONL file.

    Args:
        path: Path to the JSONL file.

    Yields:
        Parsed JSON objects from each line.
    """
    if not path.exists():
        return

    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def read_jsonl_typed(path: Path, model: Type[T]) -> Generator[T, None, None]:
    """Read records from a JSONL file and parse into Pydantic models.

    Args:
        path: Path to the JSONL file.
        model: Pydantic model class to parse records into.

    Yields:
        Pydantic model instances.
    """
    for record in read_jsonl(path):
        yield model.model_validate(record)


def write_jsonl(path: Path, records: list[dict | BaseModel]) -> None:
    """Write records to a JSONL file (overwrites existing).

    Args:
        path: Path to the JSONL file.
        records: List of dicts or Pydantic models to write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        for record in records:
            if isinstance(record, BaseModel):
                f.write(record.model_dump_json(exclude_defaults=True) + '\n')
            else:
                f.write(json.dumps(record) + '\n')


def read_json(path: Path) -> dict | list:
    """Read a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed JSON value.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json(path: Path, data: dict | list) -> None:
    """Write a JSON file.

    Args:
        path: Path to the JSON file.
        data: Value to write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def write_text_files(files: dict[Path, str]) -> None:
    """Write several text files after all of their contents are known.

    Args:
        files: Mapping of destination path to file content.
    """
    for path, content in files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
