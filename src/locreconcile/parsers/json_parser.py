"""JSON locale file codec (flat key-value and nested)."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass
class JSONEntry:
    """A single JSON translation unit."""
    key: str  # dot-separated for nested
    value: str


@dataclass
class JSONFileData:
    """Parsed JSON locale file."""
    path: Optional[Path]
    entries: list[JSONEntry]
    document: dict = field(default_factory=dict)  # as parsed, values untouched

    @property
    def nested(self) -> bool:
        return is_nested(self.document)

    @property
    def mapping(self) -> dict[str, str]:
        return {e.key: e.value for e in self.entries}

    @property
    def total_count(self) -> int:
        return len(self.entries)


def to_text(value: Any) -> str:
    """Coerce a scalar leaf value to the string stored in a row."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def is_nested(document: Mapping) -> bool:
    """True when any top-level value is an object."""
    return any(isinstance(v, dict) for v in document.values())


def flatten_document(document: Mapping) -> dict[str, str]:
    """Flat key→string view of a parsed document, as rows see it."""
    return {e.key: e.value for e in _flatten(document)}


def _flatten(obj: dict, prefix: str = "") -> list[JSONEntry]:
    """Flatten nested dict to dot-separated keys."""
    entries = []
    for k, v in obj.items():
        full_key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            entries.extend(_flatten(v, full_key))
        else:
            entries.append(JSONEntry(key=full_key, value=to_text(v)))
    return entries


def _unflatten(mapping: Mapping) -> dict:
    """Unflatten dot-separated keys back to a nested dict.

    Falls back to the flat mapping when a key is both a leaf and a prefix.
    """
    result: dict = {}
    for key, value in mapping.items():
        parts = key.split(".")
        d = result
        for part in parts[:-1]:
            d = d.setdefault(part, {})
            if not isinstance(d, dict):
                return dict(mapping)
        if parts[-1] in d:
            return dict(mapping)
        d[parts[-1]] = value
    return result


def loads_json(text: str, path: Optional[Path] = None) -> JSONFileData:
    """Parse JSON locale text; a non-object document yields no entries."""
    data = json.loads(text)
    if not isinstance(data, dict):
        return JSONFileData(path=path, entries=[])
    return JSONFileData(path=path, entries=_flatten(data), document=data)


def parse_json(path: str | Path) -> JSONFileData:
    """Parse a JSON locale file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        return loads_json(f.read(), path)


def dumps_mapping(mapping: Mapping, nested: bool = False) -> str:
    """Serialize a mapping as pretty-printed, newline-terminated JSON.

    With ``nested`` the top-level dot-separated keys are nested as well.
    """
    obj = _unflatten(copy.deepcopy(dict(mapping))) if nested else dict(mapping)
    return json.dumps(obj, ensure_ascii=False, indent=2, default=str) + "\n"


def save_json(mapping: Mapping, path: str | Path, nested: bool = False) -> None:
    """Save a mapping as a JSON locale file."""
    with open(Path(path), "w", encoding="utf-8") as f:
        f.write(dumps_mapping(mapping, nested))
