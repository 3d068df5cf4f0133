"""Reconciliation engine: rows, diff, filters, stats, output and the editing session."""

from locreconcile.reconcile.diff import build_rows
from locreconcile.reconcile.filters import FilterState, apply_visibility, compute_visibility
from locreconcile.reconcile.output import build_output
from locreconcile.reconcile.rows import Row, set_target_value
from locreconcile.reconcile.session import (
    LoadError,
    ReconciliationSession,
    SessionNotReady,
    SessionState,
)
from locreconcile.reconcile.stats import Stats, compute_stats, format_stats

__all__ = [
    "Row", "set_target_value", "build_rows",
    "FilterState", "compute_visibility", "apply_visibility",
    "Stats", "compute_stats", "format_stats",
    "build_output",
    "ReconciliationSession", "SessionState", "SessionNotReady", "LoadError",
]
