"""Shared fixtures for locreconcile tests."""
import sys
from pathlib import Path

import pytest

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point the settings service at a temp file and reset its singleton."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr("locreconcile.services.settings._SETTINGS_FILE", settings_file)
    from locreconcile.services.settings import Settings
    Settings.reset_instance()
    yield settings_file
    Settings.reset_instance()


@pytest.fixture
def provider():
    """In-memory provider with the base language and one partial translation."""
    from locreconcile.services.sources import MemorySourceProvider
    return MemorySourceProvider({
        "es": {"greet": "Hola", "bye": "Adios"},
        "en": {"greet": "Hello", "extra1": "X"},
    })


@pytest.fixture
def session(provider):
    from locreconcile.reconcile.session import ReconciliationSession
    s = ReconciliationSession(provider, "es")
    s.load("en")
    return s
