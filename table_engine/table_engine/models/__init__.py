"""Domain models for the table engine."""

from table_engine.models.cell import (
    Cell,
    CellStatus,
    SurplusCell,
    display_value,
    inspect_value,
    values_equal,
)
from table_engine.models.diff import DiffOptions, DivergenceReport

__all__ = [
    "Cell",
    "CellStatus",
    "DiffOptions",
    "DivergenceReport",
    "SurplusCell",
    "display_value",
    "inspect_value",
    "values_equal",
]
