"""Tabular diff and transformation engine.

Build a :class:`DataTable` from rows, maps or a table literal, attach
column and header mappers, then compare it with another table::

    expected = DataTable.from_data([["name", "age"], ["ada", "36"]])
    expected.map_column("age", int).diff(actual)

A divergence raises :class:`Different`, whose ``table`` renders the
annotated diff.
"""

from table_engine.errors import (
    AmbiguousHeaderMatch,
    Different,
    MalformedInput,
    NoHeaderMatch,
    TableEngineError,
    UnknownColumn,
    WrongShape,
)
from table_engine.models import Cell, CellStatus, DiffOptions, DivergenceReport
from table_engine.render import render_table
from table_engine.table import DataTable, ensure_table, parse_table_literal

__version__ = "0.1.0"

__all__ = [
    "AmbiguousHeaderMatch",
    "Cell",
    "CellStatus",
    "DataTable",
    "DiffOptions",
    "Different",
    "DivergenceReport",
    "MalformedInput",
    "NoHeaderMatch",
    "TableEngineError",
    "UnknownColumn",
    "WrongShape",
    "ensure_table",
    "parse_table_literal",
    "render_table",
]
