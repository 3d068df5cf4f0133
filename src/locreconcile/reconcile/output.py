"""Merge edited row values back over the original target document."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from locreconcile.parsers.json_parser import to_text
from locreconcile.reconcile.rows import Row


def copy_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Deep copy of a parsed document; nested objects and lists are not shared."""
    return copy.deepcopy(dict(document))


def _assign(document: dict, key: str, value: str, nested: bool) -> None:
    """Write ``value`` for a row key, at the place the document keeps that key.

    A literal top-level key wins. Otherwise the dot path is followed through
    existing objects; missing objects are created only when ``nested``. Keys
    that cannot be placed on a path are written flat. A leaf whose text
    already equals ``value`` keeps its original JSON type.
    """
    if key in document and not isinstance(document[key], dict):
        if to_text(document[key]) != value:
            document[key] = value
        return
    parts = key.split(".")
    d = document
    for part in parts[:-1]:
        child = d.get(part)
        if child is None and nested:
            child = d[part] = {}
        if not isinstance(child, dict):
            document[key] = value
            return
        d = child
    leaf = parts[-1]
    if isinstance(d.get(leaf), dict):
        document[key] = value
    elif leaf not in d or to_text(d[leaf]) != value:
        d[leaf] = value


def build_output(target: Mapping[str, Any], rows: Iterable[Row],
                 nested: bool = False) -> dict[str, Any]:
    """Return a new document: the target copy with every row's value written into it.

    Keys only the target has (extras) keep their original value, type and
    nesting. Base keys the target lacked are appended in row order, nested
    when ``nested`` (the base file nests its keys).
    """
    output = copy_document(target)
    for row in rows:
        _assign(output, row.key, row.target_value, nested)
    return output
