"""Cell values and their diff annotations.

A :class:`Cell` is owned by exactly one table.  The table exposes the same
cell object through its row index and its column index, so cells are plain
mutable objects rather than value types.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class CellStatus(str, Enum):
    """Diff annotation carried by every cell."""

    UNCHANGED = "unchanged"
    REMOVED = "removed"
    INSERTED = "inserted"


def display_value(value: Any) -> str:
    """Printed form of a cell value: ``true``/``false`` for booleans, blank for ``None``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def inspect_value(value: Any) -> str:
    """Type-revealing form of a cell value.

    Strings are double-quoted so that ``"true"`` can be told apart from the
    boolean ``true``; ``None`` is shown as ``nil``.
    """
    if value is None:
        return "nil"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return display_value(value)


def values_equal(left: Any, right: Any) -> bool:
    """Direct equality that never conflates booleans with numbers."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


class Cell:
    """A single value at a (row, column) position of a table."""

    __slots__ = ("value", "status", "type_mismatch", "row_index", "col_index")

    def __init__(self, value: Any, row_index: int = -1, col_index: int = -1) -> None:
        self.value = value
        self.status = CellStatus.UNCHANGED
        self.type_mismatch = False
        self.row_index = row_index
        self.col_index = col_index

    @property
    def is_placeholder(self) -> bool:
        return False

    def matches(self, other: Cell) -> bool:
        """Cell equality used by alignment; placeholders match anything."""
        if other.is_placeholder:
            return True
        return values_equal(self.value, other.value)

    @property
    def text(self) -> str:
        if self.type_mismatch:
            return f"(i) {inspect_value(self.value)}"
        return display_value(self.value)

    def __repr__(self) -> str:
        return f"Cell({self.value!r}, status={self.status.value})"


class SurplusCell(Cell):
    """Placeholder padding a column that exists on only one side of a diff.

    Always reported as inserted and equal to any other cell.
    """

    __slots__ = ()

    @property  # type: ignore[override]
    def status(self) -> CellStatus:
        return CellStatus.INSERTED

    @status.setter
    def status(self, _value: CellStatus) -> None:
        pass

    @property
    def is_placeholder(self) -> bool:
        return True

    def matches(self, other: Cell) -> bool:
        return True
