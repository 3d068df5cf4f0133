"""Settings service: load/save ~/.config/locreconcile/settings.json."""

from __future__ import annotations

import json
import locale
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Optional

log = logging.getLogger(__name__)

_SETTINGS_FILE = Path.home() / ".config" / "locreconcile" / "settings.json"

# Key under which the last successfully loaded language is remembered
LAST_LANGUAGE_KEY = "last_language"

BASE_LANGUAGE = "es"

# Languages the editor offers, base language first
LANGUAGES = [
    ("es", "Espanol"),
    ("en", "Ingles"),
    ("de", "Aleman"),
    ("ca", "Catala"),
    ("gl", "Galego"),
    ("eu", "Euskara"),
]

DEFAULTS: dict[str, Any] = {
    # Sources
    "base_language": BASE_LANGUAGE,
    "source_dir": "",
    "source_url": "",

    # Session
    LAST_LANGUAGE_KEY: "",

    # Export
    "export_dir": "",
    "export_prefix": "qplay_",
    "nested_output": False,
}


def language_codes() -> list[str]:
    return [code for code, _ in LANGUAGES]


def language_label(code: str) -> str:
    """Display label such as ``"Ingles (en)"``; unknown codes show as-is."""
    for lang, name in LANGUAGES:
        if lang == code:
            return f"{name} ({code})"
    return code


def default_edit_language(base_language: str = BASE_LANGUAGE) -> str:
    """First offered language that is not the base language."""
    for code, _ in LANGUAGES:
        if code != base_language:
            return code
    return base_language


def _detect_system_language() -> str:
    """Two-letter code of the system locale, or "" if unknown."""
    try:
        loc = locale.getlocale()[0] or ""
    except ValueError:
        loc = ""
    return loc[:2].lower() if len(loc) >= 2 else ""


def choose_initial_language(settings: Settings, available: Optional[Sequence[str]] = None,
                            system_lang: Optional[str] = None,
                            base_language: Optional[str] = None) -> str:
    """Pick the language to open at startup.

    Remembered language first, then the system language unless it is the
    base language, then the first other language offered.
    """
    available = list(available) if available is not None else language_codes()
    base_language = base_language or settings.get_value("base_language")
    saved = settings.get_value(LAST_LANGUAGE_KEY)
    if saved and saved in available:
        return saved
    if system_lang is None:
        system_lang = _detect_system_language()
    if system_lang and system_lang != base_language and system_lang in available:
        return system_lang
    for code in available:
        if code != base_language:
            return code
    return default_edit_language(base_language)


class Settings:
    """Application settings backed by a JSON file."""

    _instance: Settings | None = None

    def __init__(self):
        self._data: dict[str, Any] = dict(DEFAULTS)
        self._load()

    @classmethod
    def get(cls) -> Settings:
        if cls._instance is None:
            cls._instance = Settings()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    # ── Public API ────────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self._data.get(key, DEFAULTS.get(key))

    def __setitem__(self, key: str, value: Any):
        self._data[key] = value

    def get_value(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default if default is not None else DEFAULTS.get(key))

    def set_value(self, key: str, value: Any):
        self._data[key] = value

    @property
    def last_language(self) -> str:
        return self._data.get(LAST_LANGUAGE_KEY, "")

    def remember_language(self, lang: str) -> None:
        """Persist the language that was just loaded."""
        self._data[LAST_LANGUAGE_KEY] = lang
        self.save()

    def save(self):
        _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
        _SETTINGS_FILE.write_text(
            json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8"
        )

    # ── Private ───────────────────────────────────────────────────

    def _load(self):
        if not _SETTINGS_FILE.exists():
            return
        try:
            stored = json.loads(_SETTINGS_FILE.read_text("utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_FILE, e)
            return
        if isinstance(stored, dict):
            self._data.update(stored)
