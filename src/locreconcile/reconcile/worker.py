"""Fetching of base/target mappings, inline or on a worker thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Signal

from locreconcile.services.sources import SourceNotFound, SourceError, SourceProvider

log = logging.getLogger(__name__)


class LoadError(Exception):
    """The base mapping could not be loaded."""


def fetch_sources(provider: SourceProvider, base_language: str,
                  lang: str) -> tuple[dict, dict]:
    """Fetch the ``(base, target)`` documents for ``lang``.

    A failed base fetch raises LoadError. A target that does not exist is
    an empty mapping; any other target failure is a LoadError too.
    """
    try:
        base = provider.fetch_document(base_language)
    except SourceError as e:
        raise LoadError(f"Could not load base language '{base_language}': {e}") from e
    try:
        target = provider.fetch_document(lang)
    except SourceNotFound:
        log.info("No mapping for '%s' yet, starting from empty", lang)
        target = {}
    except SourceError as e:
        raise LoadError(f"Could not load language '{lang}': {e}") from e
    return base, target


class LoadWorker(QThread):
    """Thread that fetches one language and reports back with its load token."""

    loaded = Signal(int, object, object)  # token, base, target
    failed = Signal(int, str)  # token, message

    def __init__(self, provider: SourceProvider, base_language: str, lang: str,
                 token: int, parent=None):
        super().__init__(parent)
        self.provider = provider
        self.base_language = base_language
        self.lang = lang
        self.token = token

    def run(self):
        try:
            base, target = fetch_sources(self.provider, self.base_language, self.lang)
        except LoadError as e:
            self.failed.emit(self.token, str(e))
            return
        self.loaded.emit(self.token, base, target)
