"""Per-key row state: base value, editable target value and derived status flags."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Row:
    """A single reconciliation unit for one base key."""
    key: str
    base_value: str
    target_value: str = ""
    is_missing: bool = field(default=True, init=False)
    is_changed: bool = field(default=True, init=False)
    visible: bool = field(default=True, init=False)

    # Lower-cased copies used by the search filter
    key_lower: str = field(default="", init=False, repr=False)
    base_lower: str = field(default="", init=False, repr=False)
    target_lower: str = field(default="", init=False, repr=False)

    def __post_init__(self):
        self.key_lower = self.key.lower()
        self.base_lower = self.base_value.lower()
        set_target_value(self, self.target_value)

    @property
    def status(self) -> str:
        if self.is_missing:
            return "missing"
        if self.is_changed:
            return "changed"
        return "same"


def set_target_value(row: Row, value: str) -> None:
    """Store a new target value and refresh the derived flags.

    Missing means blank after stripping whitespace. Changed is exact string
    inequality with the base value, so surrounding whitespace counts.
    """
    row.target_value = value
    row.target_lower = value.lower()
    row.is_missing = value.strip() == ""
    row.is_changed = value != row.base_value
