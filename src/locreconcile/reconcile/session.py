"""Reconciliation session: the editable, filtered view of one language.

Lifecycle::

    EMPTY ──load──▶ LOADING ──ok──▶ READY ──load──▶ LOADING ──▶ ...
                       │                               │
                       └─fail─▶ EMPTY                  └─fail─▶ READY (previous data kept)

Only the most recently started load may complete; results carrying an older
token are dropped. Edits made while a load is pending apply to the previous
rows and are discarded when the new load lands.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from locreconcile.parsers.json_parser import dumps_mapping, flatten_document, is_nested
from locreconcile.reconcile.diff import build_rows
from locreconcile.reconcile.filters import FilterState, apply_visibility, is_row_visible
from locreconcile.reconcile.output import build_output, copy_document
from locreconcile.reconcile.rows import Row, set_target_value
from locreconcile.reconcile.stats import Stats, compute_stats
from locreconcile.reconcile.worker import LoadError, LoadWorker, fetch_sources
from locreconcile.services.settings import BASE_LANGUAGE
from locreconcile.services.sources import SourceProvider

log = logging.getLogger(__name__)

__all__ = ["ReconciliationSession", "SessionState", "SessionNotReady", "LoadError"]

STATUS_LOADING = "Loading translations..."
STATUS_EDITING = "Editing: {lang}"
STATUS_ERROR = "Error loading translations: {error}"


class SessionState(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class SessionNotReady(Exception):
    """An operation needs loaded rows and none are available."""


class ReconciliationSession(QObject):
    """Holds base/target mappings, rows, filter and focus for one language."""

    rows_reset = Signal()
    row_changed = Signal(str)  # key
    visibility_changed = Signal(list)  # keys whose visibility flipped
    stats_changed = Signal(object)  # Stats
    status_changed = Signal(str)
    load_failed = Signal(str)

    def __init__(self, provider: SourceProvider, base_language: str = BASE_LANGUAGE,
                 settings=None, parent=None):
        super().__init__(parent)
        self.provider = provider
        self.base_language = base_language
        self._settings = settings

        self.state = SessionState.EMPTY
        self.language: Optional[str] = None
        self.pending_language: Optional[str] = None
        self.status = ""

        self.base: dict[str, str] = {}  # flattened
        self.target: dict = {}  # target document as fetched
        self.nested = False  # base file nests its keys
        self.rows: list[Row] = []
        self.extra_keys: list[str] = []
        self._index: dict[str, Row] = {}

        self.filter = FilterState()
        self.active_key: Optional[str] = None
        self.stats = Stats()

        self._load_token = 0
        self._workers: list[LoadWorker] = []

    # ── Loading ───────────────────────────────────────────────────

    @property
    def is_ready(self) -> bool:
        return self.language is not None

    def begin_load(self, lang: str) -> int:
        """Mark a load of ``lang`` as started and return its token."""
        self._load_token += 1
        self.pending_language = lang
        self.state = SessionState.LOADING
        self._set_status(STATUS_LOADING)
        log.info("Loading '%s' (token %d)", lang, self._load_token)
        return self._load_token

    def complete_load(self, token: int, base: dict, target: dict) -> bool:
        """Install freshly fetched documents; returns False for a superseded load.

        Rows see the flattened documents. The target document is kept whole
        so export starts from it.
        """
        if token != self._load_token or self.pending_language is None:
            log.info("Dropping stale load result (token %d, current %d)", token, self._load_token)
            return False
        lang = self.pending_language
        self.base = flatten_document(base)
        self.target = copy_document(target)
        self.nested = is_nested(base)
        rows, extra_keys = build_rows(self.base, flatten_document(target))

        self.rows = rows
        self.extra_keys = extra_keys
        self._index = {row.key: row for row in rows}
        self.filter = FilterState()
        self.active_key = None
        apply_visibility(self.rows, self.filter)
        self.stats = compute_stats(self.rows, self.extra_keys)

        self.language = lang
        self.pending_language = None
        self.state = SessionState.READY
        log.info("Loaded '%s': %d keys, %d extra", lang, len(rows), len(extra_keys))

        self.rows_reset.emit()
        self.stats_changed.emit(self.stats)
        self._set_status(STATUS_EDITING.format(lang=lang))

        if self._settings is not None:
            try:
                self._settings.remember_language(lang)
            except OSError as e:
                log.warning("Could not remember language '%s': %s", lang, e)
        return True

    def fail_load(self, token: int, error) -> bool:
        """Report a failed load; previous rows, if any, stay untouched."""
        if token != self._load_token or self.pending_language is None:
            log.info("Dropping stale load failure (token %d): %s", token, error)
            return False
        message = str(error)
        log.error("Load of '%s' failed: %s", self.pending_language, message)
        self.pending_language = None
        self.state = SessionState.READY if self.is_ready else SessionState.EMPTY
        self._set_status(STATUS_ERROR.format(error=message))
        self.load_failed.emit(message)
        return True

    def load(self, lang: str) -> None:
        """Fetch and install ``lang`` synchronously; raises LoadError on failure."""
        token = self.begin_load(lang)
        try:
            base, target = fetch_sources(self.provider, self.base_language, lang)
        except LoadError as e:
            self.fail_load(token, e)
            raise
        self.complete_load(token, base, target)

    def load_async(self, lang: str) -> LoadWorker:
        """Start fetching ``lang`` on a worker thread; results arrive via signals."""
        token = self.begin_load(lang)
        worker = LoadWorker(self.provider, self.base_language, lang, token)
        worker.loaded.connect(self.complete_load)
        worker.failed.connect(self.fail_load)
        worker.finished.connect(lambda: self._workers.remove(worker))
        self._workers.append(worker)
        worker.start()
        return worker

    def reload(self) -> None:
        lang = self.pending_language or self.language
        if not lang:
            raise SessionNotReady("No language selected")
        self.load(lang)

    # ── Editing ───────────────────────────────────────────────────

    def row(self, key: str) -> Row:
        self._require_ready()
        return self._index[key]

    def edit(self, key: str, value: str) -> None:
        """Set a row's target value, then refresh its visibility and the stats."""
        row = self.row(key)
        set_target_value(row, value)
        self.row_changed.emit(key)
        self._refresh_rows([row])
        self.stats = compute_stats(self.rows, self.extra_keys)
        self.stats_changed.emit(self.stats)

    def set_filter(self, query: Optional[str] = None, missing_only: Optional[bool] = None,
                   same_only: Optional[bool] = None) -> None:
        """Change any of the filter inputs; omitted ones keep their value."""
        self._require_ready()
        if query is not None:
            self.filter.query = query
        if missing_only is not None:
            self.filter.missing_only = missing_only
        if same_only is not None:
            self.filter.same_only = same_only
        flipped = apply_visibility(self.rows, self.filter, self.active_key)
        if flipped:
            self.visibility_changed.emit(flipped)

    def set_active_edit(self, key: Optional[str]) -> None:
        """Move the editing focus; the focused row ignores the toggles."""
        self._require_ready()
        if key is not None and key not in self._index:
            raise KeyError(key)
        affected = [self._index[k] for k in (self.active_key, key)
                    if k is not None and k in self._index]
        self.active_key = key
        self._refresh_rows(affected)

    # ── Views ─────────────────────────────────────────────────────

    def visible_rows(self) -> list[Row]:
        return [row for row in self.rows if row.visible]

    def visible_keys(self) -> set[str]:
        return {row.key for row in self.rows if row.visible}

    # ── Export ────────────────────────────────────────────────────

    def export_output(self) -> dict:
        """Merged document: the original target with the current row values written in."""
        self._require_ready()
        return build_output(self.target, self.rows, nested=self.nested)

    def export_text(self, nested: bool = False) -> str:
        return dumps_mapping(self.export_output(), nested=nested)

    # ── Private ───────────────────────────────────────────────────

    def _require_ready(self):
        if not self.is_ready:
            raise SessionNotReady("No translations loaded")

    def _refresh_rows(self, rows: list[Row]):
        query = self.filter.normalized_query
        flipped = []
        for row in rows:
            visible = is_row_visible(row, self.filter, query, self.active_key)
            if visible != row.visible:
                row.visible = visible
                flipped.append(row.key)
        if flipped:
            self.visibility_changed.emit(flipped)

    def _set_status(self, text: str):
        self.status = text
        self.status_changed.emit(text)
