"""Export surface: serialize the merged mapping to a file or the clipboard."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from locreconcile.parsers.json_parser import dumps_mapping

log = logging.getLogger(__name__)


class ExportError(Exception):
    pass


def export_filename(lang: str, prefix: str = "qplay_") -> str:
    return f"{prefix}{lang}.json"


def render_export(mapping: Mapping[str, str], nested: bool = False) -> str:
    """Pretty-printed JSON text, 2-space indented with a trailing newline."""
    return dumps_mapping(mapping, nested=nested)


def save_export(text: str, directory: str | Path, lang: str, prefix: str = "qplay_") -> Path:
    """Write ``text`` to ``<directory>/<prefix><lang>.json`` and return the path."""
    out = Path(directory) / export_filename(lang, prefix)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, "utf-8")
    except OSError as e:
        raise ExportError(f"Could not write {out}: {e}")
    log.info("Exported %s", out)
    return out


def copy_to_clipboard(text: str) -> None:
    """Put ``text`` on the system clipboard; needs a running QGuiApplication."""
    from PySide6.QtGui import QGuiApplication

    if not isinstance(QGuiApplication.instance(), QGuiApplication):
        raise ExportError("Clipboard unavailable: no GUI application is running")
    clipboard = QGuiApplication.clipboard()
    if clipboard is None:
        raise ExportError("Clipboard unavailable")
    clipboard.setText(text)
    log.info("Copied %d characters to the clipboard", len(text))
