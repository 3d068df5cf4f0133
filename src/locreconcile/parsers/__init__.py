"""Key-value mapping codecs for JSON and YAML locale files."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from locreconcile.parsers.json_parser import flatten_document, parse_json
from locreconcile.parsers.yaml_parser import parse_yaml

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def parse_document(path: Union[str, Path]) -> dict:
    """Parse a locale file, by suffix, into its document with values untouched."""
    path = Path(path)
    if path.suffix in (".yaml", ".yml"):
        return parse_yaml(path).document
    return parse_json(path).document


def parse_mapping(path: Union[str, Path]) -> dict[str, str]:
    """Parse a locale file into a flat key→string mapping, by file suffix."""
    return flatten_document(parse_document(path))
