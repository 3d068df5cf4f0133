"""Tests for the command-line entry point."""
import json

import pytest


def _run(fixtures_dir, *args):
    from locreconcile.app import main
    return main(["--source", str(fixtures_dir), *args])


class TestCLI:
    def test_stats(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "stats", "en") == 0
        assert capsys.readouterr().out.strip() == "Keys: 5 · Missing: 2 · Changed: 4 · Extras: 1"

    def test_stats_with_edits(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "stats", "en", "--set", "bye=Bye", "--set", "menu.quit=Quit") == 0
        assert capsys.readouterr().out.strip() == "Keys: 5 · Missing: 0 · Changed: 4 · Extras: 1"

    def test_missing(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "missing", "en") == 0
        assert capsys.readouterr().out.split() == ["bye", "menu.quit"]

    def test_missing_with_query(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "missing", "en", "-q", "MENU") == 0
        assert capsys.readouterr().out.split() == ["menu.quit"]

    def test_extras(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "extras", "en") == 0
        assert capsys.readouterr().out.split() == ["legacy_title"]

    def test_export_stdout(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "export", "en", "--stdout", "--set", "bye=Bye") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["bye"] == "Bye"
        assert data["legacy_title"] == "QPlay Classic"
        assert set(data) == {"greet", "bye", "menu.play", "menu.quit", "score", "legacy_title"}

    def test_export_file(self, fixtures_dir, tmp_path, capsys):
        assert _run(fixtures_dir, "export", "de", "-o", str(tmp_path)) == 0
        out = tmp_path / "qplay_de.json"
        data = json.loads(out.read_text("utf-8"))
        assert data["greet"] == "Hallo"
        assert data["bye"] == ""
        assert out.read_text("utf-8").endswith("}\n")

    def test_export_nested(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "export", "en", "--stdout", "--nested") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["menu"]["play"] == "Play"

    def test_load_failure(self, tmp_path, capsys):
        from locreconcile.app import main
        assert main(["--source", str(tmp_path), "stats", "en"]) == 2
        assert "Error loading translations" in capsys.readouterr().err

    def test_default_language_remembered(self, fixtures_dir, capsys):
        assert _run(fixtures_dir, "stats", "de") == 0
        capsys.readouterr()
        from locreconcile.services.settings import Settings
        Settings.reset_instance()
        assert _run(fixtures_dir, "extras") == 0
        assert capsys.readouterr().out.split() == []
        assert Settings.get().last_language == "de"

    def test_languages(self, capsys):
        from locreconcile.app import main
        assert main(["languages"]) == 0
        assert "Ingles (en)" in capsys.readouterr().out

    def test_bad_assignment(self, fixtures_dir):
        with pytest.raises(SystemExit):
            _run(fixtures_dir, "stats", "en", "--set", "novalue")

    def test_export_keeps_structured_extras(self, tmp_path, capsys):
        (tmp_path / "es.json").write_text(json.dumps({"greet": "Hola"}), "utf-8")
        (tmp_path / "en.json").write_text(json.dumps({
            "greet": "Hello",
            "legacy": {"title": "Old"},
            "count": 5,
            "tags": ["a", "b"],
        }), "utf-8")
        assert _run(tmp_path, "export", "en", "--stdout") == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "greet": "Hello",
            "legacy": {"title": "Old"},
            "count": 5,
            "tags": ["a", "b"],
        }

    def test_export_keeps_structured_extras_nested(self, tmp_path, capsys):
        (tmp_path / "es.json").write_text(json.dumps({"greet": "Hola"}), "utf-8")
        (tmp_path / "en.json").write_text(json.dumps({
            "legacy": {"title": "Old"},
            "count": 5,
        }), "utf-8")
        assert _run(tmp_path, "export", "en", "--stdout", "--nested") == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"legacy": {"title": "Old"}, "count": 5, "greet": ""}

    def test_initial_language_skips_base(self, fixtures_dir, capsys, monkeypatch):
        monkeypatch.setattr("locreconcile.services.settings._detect_system_language", lambda: "de")
        assert _run(fixtures_dir, "--base", "de", "stats") == 0
        capsys.readouterr()
        from locreconcile.services.settings import Settings
        assert Settings.get().last_language == "es"
