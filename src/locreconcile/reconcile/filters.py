"""Row visibility: search query, missing-only and same-only toggles."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from locreconcile.reconcile.rows import Row


@dataclass
class FilterState:
    """Current filter inputs."""
    query: str = ""
    missing_only: bool = False
    same_only: bool = False  # rows whose target equals base

    @property
    def normalized_query(self) -> str:
        return self.query.strip().lower()

    @property
    def is_default(self) -> bool:
        return not self.normalized_query and not self.missing_only and not self.same_only


def _matches_search(row: Row, query: str) -> bool:
    if not query:
        return True
    return query in row.key_lower or query in row.base_lower or query in row.target_lower


def is_row_visible(row: Row, filter_state: FilterState, query: str,
                   active_key: Optional[str] = None) -> bool:
    """Decide visibility of one row; ``query`` must already be normalized.

    The row being edited bypasses both toggles but not the search query.
    """
    editing = active_key is not None and row.key == active_key
    matches_missing = not filter_state.missing_only or row.is_missing
    matches_same = not filter_state.same_only or not row.is_changed
    return (_matches_search(row, query)
            and (matches_missing or editing)
            and (matches_same or editing))


def compute_visibility(rows: Iterable[Row], filter_state: FilterState,
                       active_key: Optional[str] = None) -> set[str]:
    """Return the set of keys visible under ``filter_state``."""
    query = filter_state.normalized_query
    return {row.key for row in rows if is_row_visible(row, filter_state, query, active_key)}


def apply_visibility(rows: Iterable[Row], filter_state: FilterState,
                     active_key: Optional[str] = None) -> list[str]:
    """Write ``row.visible`` for every row and return the keys that flipped."""
    query = filter_state.normalized_query
    flipped = []
    for row in rows:
        visible = is_row_visible(row, filter_state, query, active_key)
        if visible != row.visible:
            row.visible = visible
            flipped.append(row.key)
    return flipped
