"""Build the row sequence and extra-key list from a base and a target mapping."""

from __future__ import annotations

from collections.abc import Mapping

from locreconcile.reconcile.rows import Row


def build_rows(base: Mapping[str, str], target: Mapping[str, str]) -> tuple[list[Row], list[str]]:
    """Return ``(rows, extra_keys)``.

    One row per base key, in base order, seeded from the target value or "".
    Extra keys are target keys absent from base, in target order.
    """
    rows = [Row(key=key, base_value=value, target_value=target.get(key, ""))
            for key, value in base.items()]
    extra_keys = [key for key in target if key not in base]
    return rows, extra_keys
