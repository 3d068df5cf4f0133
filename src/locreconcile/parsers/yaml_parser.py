"""YAML locale file codec (Rails i18n style)."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path

from locreconcile.parsers.json_parser import JSONEntry, to_text


@dataclass
class YAMLFileData:
    """Parsed YAML locale file."""
    path: Path
    entries: list[JSONEntry]
    root_key: str = ""  # e.g. "es" for Rails i18n
    document: dict = field(default_factory=dict)  # below the root key, values untouched

    @property
    def mapping(self) -> dict[str, str]:
        return {e.key: e.value for e in self.entries}


def _flatten_yaml(obj, prefix: str = "") -> list[JSONEntry]:
    """Flatten nested YAML dict."""
    entries = []
    if isinstance(obj, dict):
        for k, v in obj.items():
            full_key = f"{prefix}.{k}" if prefix else str(k)
            if isinstance(v, dict):
                entries.extend(_flatten_yaml(v, full_key))
            else:
                entries.append(JSONEntry(key=full_key, value=to_text(v)))
    return entries


def parse_yaml(path: str | Path) -> YAMLFileData:
    """Parse a YAML locale file.

    A single top-level locale key (``es:``) is unwrapped so keys match the
    JSON files of the same project.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        return YAMLFileData(path=path, entries=[])

    keys = list(data.keys())
    if len(keys) == 1 and isinstance(data[keys[0]], dict) and str(keys[0]) == path.stem:
        document = data[keys[0]]
        return YAMLFileData(path=path, entries=_flatten_yaml(document),
                            root_key=str(keys[0]), document=document)
    return YAMLFileData(path=path, entries=_flatten_yaml(data), document=data)
