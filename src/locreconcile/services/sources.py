"""Source providers: fetch a language's locale document by identifier."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Protocol

import requests
import yaml

from locreconcile.parsers import SUPPORTED_SUFFIXES, parse_document
from locreconcile.parsers.json_parser import flatten_document

log = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30


class SourceError(Exception):
    """A mapping could not be obtained."""


class SourceNotFound(SourceError):
    """No mapping exists for the identifier."""


class SourceIOError(SourceError):
    """The mapping exists but could not be read or decoded."""


class SourceProvider(Protocol):
    def fetch_document(self, identifier: str) -> dict[str, Any]: ...

    def fetch_mapping(self, identifier: str) -> dict[str, str]: ...


def check_identifier(identifier: str) -> None:
    """Reject identifiers that would escape the source's directory or URL."""
    if (not identifier or "/" in identifier or "\\" in identifier
            or identifier.startswith(".")):
        raise SourceNotFound(f"Invalid language identifier: {identifier!r}")


class BaseSourceProvider:
    """Providers return the parsed document; the flat view is derived from it."""

    def fetch_document(self, identifier: str) -> dict[str, Any]:
        raise NotImplementedError

    def fetch_mapping(self, identifier: str) -> dict[str, str]:
        return flatten_document(self.fetch_document(identifier))


class MemorySourceProvider(BaseSourceProvider):
    """Serve documents from a dict of ``{identifier: document}``."""

    def __init__(self, mappings: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self.mappings: dict[str, dict[str, Any]] = {
            lang: dict(m) for lang, m in (mappings or {}).items()
        }

    def fetch_document(self, identifier: str) -> dict[str, Any]:
        try:
            return copy.deepcopy(self.mappings[identifier])
        except KeyError:
            raise SourceNotFound(f"No mapping for '{identifier}'")


class DirectorySourceProvider(BaseSourceProvider):
    """Read ``<root>/<lang>.json`` (or ``.yaml``/``.yml``) locale files."""

    SUFFIXES = SUPPORTED_SUFFIXES

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, identifier: str) -> Optional[Path]:
        for suffix in self.SUFFIXES:
            candidate = self.root / f"{identifier}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def fetch_document(self, identifier: str) -> dict[str, Any]:
        check_identifier(identifier)
        path = self.path_for(identifier)
        if path is None:
            raise SourceNotFound(f"No locale file for '{identifier}' in {self.root}")
        log.debug("Reading %s", path)
        try:
            return parse_document(path)
        except (OSError, ValueError) as e:
            raise SourceIOError(f"Could not read {path.name}: {e}")
        except yaml.YAMLError as e:
            raise SourceIOError(f"Could not parse {path.name}: {e}")


class HttpSourceProvider(BaseSourceProvider):
    """Fetch ``<base_url>/<lang>.json`` over HTTP, bypassing caches."""

    def __init__(self, base_url: str, timeout: float = _DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def url_for(self, identifier: str) -> str:
        check_identifier(identifier)
        return f"{self.base_url}/{requests.utils.quote(identifier)}.json"

    def fetch_document(self, identifier: str) -> dict[str, Any]:
        url = self.url_for(identifier)
        try:
            r = self._session.get(url, headers={"Cache-Control": "no-store"}, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceIOError(f"Request for {url} failed: {e}")
        if r.status_code == 404:
            raise SourceNotFound(f"{url}: 404 Not Found")
        if r.status_code != 200:
            raise SourceIOError(f"{url}: HTTP {r.status_code}")
        try:
            data = json.loads(r.text)
        except json.JSONDecodeError as e:
            raise SourceIOError(f"{url}: invalid JSON ({e})")
        return data if isinstance(data, dict) else {}


def provider_from_settings(settings, source_dir: Optional[str] = None,
                           source_url: Optional[str] = None) -> SourceProvider:
    """Build the provider named by explicit arguments or the settings store.

    A URL wins over a directory; with neither, ``./locales`` is used.
    """
    url = source_url or (None if source_dir else settings.get_value("source_url"))
    if url:
        return HttpSourceProvider(url)
    directory = source_dir or settings.get_value("source_dir") or "locales"
    return DirectorySourceProvider(directory)
