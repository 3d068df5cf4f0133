"""Tests for row visibility filtering."""
import pytest


def _rows():
    from locreconcile.reconcile.diff import build_rows
    rows, _ = build_rows({"a": "Hola", "b": "Adios"}, {"a": "", "b": "Bye"})
    return rows


class TestFilterState:
    def test_normalized_query(self):
        from locreconcile.reconcile.filters import FilterState
        assert FilterState(query="  HoLa ").normalized_query == "hola"

    def test_is_default(self):
        from locreconcile.reconcile.filters import FilterState
        assert FilterState().is_default
        assert FilterState(query="   ").is_default
        assert not FilterState(missing_only=True).is_default


class TestComputeVisibility:
    def test_no_filter_shows_all(self):
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        assert compute_visibility(_rows(), FilterState()) == {"a", "b"}

    def test_missing_only(self):
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        visible = compute_visibility(_rows(), FilterState(query="", missing_only=True))
        assert visible == {"a"}

    def test_active_edit_bypasses_missing_only(self):
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        visible = compute_visibility(_rows(), FilterState(missing_only=True), active_key="b")
        assert visible == {"a", "b"}

    def test_active_edit_does_not_bypass_search(self):
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        visible = compute_visibility(_rows(), FilterState(query="hola"), active_key="b")
        assert visible == {"a"}

    def test_same_only_shows_unchanged(self):
        from locreconcile.reconcile.diff import build_rows
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        rows, _ = build_rows({"a": "OK", "b": "Adios"}, {"a": "OK", "b": "Bye"})
        assert compute_visibility(rows, FilterState(same_only=True)) == {"a"}

    def test_same_only_with_active_edit(self):
        from locreconcile.reconcile.diff import build_rows
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        rows, _ = build_rows({"a": "OK", "b": "Adios"}, {"a": "OK", "b": "Bye"})
        assert compute_visibility(rows, FilterState(same_only=True), active_key="b") == {"a", "b"}

    def test_both_toggles(self):
        from locreconcile.reconcile.diff import build_rows
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        rows, _ = build_rows({"a": "", "b": "Adios", "c": "  "}, {"b": "Bye"})
        # a: target "" == base "" -> missing and same; c: missing but changed
        state = FilterState(missing_only=True, same_only=True)
        assert compute_visibility(rows, state) == {"a"}

    @pytest.mark.parametrize("query,expected", [
        ("adi", {"b"}),        # base value
        ("BYE", {"b"}),        # target value
        ("  hola  ", {"a"}),   # trimmed
        ("zzz", set()),
        ("o", {"a", "b"}),
    ])
    def test_search(self, query, expected):
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        assert compute_visibility(_rows(), FilterState(query=query)) == expected

    def test_search_matches_key(self):
        from locreconcile.reconcile.diff import build_rows
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        rows, _ = build_rows({"Menu.Play": "Jugar", "menu_quit": "Salir"}, {})
        assert compute_visibility(rows, FilterState(query="menu.")) == {"Menu.Play"}

    def test_search_is_not_regex(self):
        from locreconcile.reconcile.diff import build_rows
        from locreconcile.reconcile.filters import FilterState, compute_visibility
        rows, _ = build_rows({"k.1": "a+b", "k2": "aab"}, {})
        assert compute_visibility(rows, FilterState(query="a+b")) == {"k.1"}
        assert compute_visibility(rows, FilterState(query="k.")) == {"k.1"}


class TestApplyVisibility:
    def test_writes_flags_and_reports_flips(self):
        from locreconcile.reconcile.filters import FilterState, apply_visibility
        rows = _rows()
        flipped = apply_visibility(rows, FilterState(missing_only=True))
        assert flipped == ["b"]
        assert [r.visible for r in rows] == [True, False]
        assert apply_visibility(rows, FilterState(missing_only=True)) == []
        assert apply_visibility(rows, FilterState()) == ["b"]
