"""Summary counts over the current rows."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from locreconcile.reconcile.rows import Row


@dataclass(frozen=True)
class Stats:
    total: int = 0
    missing_count: int = 0
    changed_count: int = 0
    extras_count: int = 0

    @property
    def done_count(self) -> int:
        return self.total - self.missing_count

    @property
    def percent_done(self) -> float:
        return round(self.done_count / self.total * 100, 1) if self.total else 100.0


def compute_stats(rows: Sequence[Row], extra_keys: Sequence[str]) -> Stats:
    """Count rows by their cached flags."""
    return Stats(
        total=len(rows),
        missing_count=sum(1 for r in rows if r.is_missing),
        changed_count=sum(1 for r in rows if r.is_changed),
        extras_count=len(extra_keys),
    )


def format_stats(stats: Stats) -> str:
    return (f"Keys: {stats.total} · Missing: {stats.missing_count} · "
            f"Changed: {stats.changed_count} · Extras: {stats.extras_count}")
