"""The two-dimensional table value.

A :class:`DataTable` owns a flat, row-major arena of :class:`Cell` objects.
``cells_rows`` and ``columns`` are two index views over that arena, so
``table.cells_rows[r][c] is table.columns[c][r]`` always holds.

Tables are values: :meth:`DataTable.map_column`, :meth:`DataTable.map_headers`
and :meth:`DataTable.transpose` return new tables and never touch the
original.  Mappers are deferred and re-evaluated on every view, see
:mod:`table_engine.table.pipeline`.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from table_engine.config import load_settings
from table_engine.diff.aligner import TableAligner
from table_engine.errors import Different, MalformedInput, UnknownColumn, WrongShape
from table_engine.models.cell import Cell, display_value
from table_engine.models.diff import DiffOptions
from table_engine.render import render_table
from table_engine.table.literal import parse_table_literal
from table_engine.table.pipeline import (
    ColumnMapper,
    HeaderMapper,
    Materialized,
    TransformPipeline,
    find_header,
    symbolize,
)
from table_engine.telemetry.profiling import profile_operation, table_shape

logger = logging.getLogger(__name__)

TABLE_MATCH_PREFIX = "table:"


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, bool, numbers.Number))


def _is_row(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _maps_to_rows(maps: Sequence[Mapping[Any, Any]]) -> list[list[Any]]:
    header = list(maps[0].keys())
    expected = set(header)
    for index, item in enumerate(maps):
        if set(item.keys()) != expected:
            raise MalformedInput(
                f"Map {index} has keys {sorted(map(str, item.keys()))}, "
                f"expected {sorted(map(str, header))}"
            )
    return [header] + [[item[key] for key in header] for item in maps]


class DataTable:
    """A rectangular table of cells with deferred header and column mappers.

    Parameters
    ----------
    rows:
        Rows of scalar values (``str``, ``bool``, numbers or ``None``), all of
        the same length.  The first row is conventionally the header row.
    pipeline:
        Mappers to attach.  Defaults to an empty pipeline.
    """

    __slots__ = ("_cells", "_height", "_width", "_pipeline")

    def __init__(
        self,
        rows: Sequence[Sequence[Any]] = (),
        pipeline: TransformPipeline | None = None,
    ) -> None:
        rows = list(rows)
        width = len(rows[0]) if rows else 0
        for index, row in enumerate(rows):
            if not _is_row(row):
                raise MalformedInput(f"Row {index} is not a sequence of values: {row!r}")
            if len(row) != width:
                raise MalformedInput(f"Row {index} has {len(row)} cells, expected {width}")
            for value in row:
                if not _is_scalar(value):
                    raise MalformedInput(f"Row {index} holds a non-scalar value: {value!r}")

        self._height = len(rows)
        self._width = width
        self._cells = [
            Cell(value, row_index=r, col_index=c) for r, row in enumerate(rows) for c, value in enumerate(row)
        ]
        self._pipeline = pipeline or TransformPipeline()

    # -- construction --------------------------------------------------------

    @classmethod
    def from_data(cls, data: Any) -> DataTable:
        """Build a table from a table literal, rows of values, or a list of maps.

        A list of maps becomes a header row (the first map's keys, in order)
        followed by one row per map; every map must have the same keys.
        An existing :class:`DataTable` is returned unchanged.
        """
        if isinstance(data, DataTable):
            return data
        if isinstance(data, str):
            return cls(parse_table_literal(data))
        if not isinstance(data, Sequence) or isinstance(data, bytes):
            raise MalformedInput(f"Cannot build a table from {type(data).__name__}")

        items = list(data)
        if items and all(isinstance(item, Mapping) for item in items):
            return cls(_maps_to_rows(items))
        if all(_is_row(item) for item in items):
            return cls(items)
        raise MalformedInput("Expected rows of values or a list of maps, got a mix")

    @classmethod
    def from_cells(
        cls,
        rows: Sequence[Sequence[Cell]],
        pipeline: TransformPipeline | None = None,
    ) -> DataTable:
        """Adopt already-built cells, e.g. the annotated output of a diff.

        The cells are re-indexed to their new positions and owned by the
        returned table from then on.
        """
        table = cls.__new__(cls)
        table._height = len(rows)
        table._width = len(rows[0]) if rows else 0
        table._cells = []
        for r, row in enumerate(rows):
            if len(row) != table._width:
                raise MalformedInput(f"Row {r} has {len(row)} cells, expected {table._width}")
            for c, cell in enumerate(row):
                cell.row_index = r
                cell.col_index = c
                table._cells.append(cell)
        table._pipeline = pipeline or TransformPipeline()
        return table

    def _derive(self, rows: Sequence[Sequence[Cell]], pipeline: TransformPipeline) -> DataTable:
        return DataTable.from_cells([[Cell(cell.value) for cell in row] for row in rows], pipeline)

    def copy(self) -> DataTable:
        """Return an independent table with the same raw values and mappers."""
        return self._derive(self.cells_rows, self._pipeline)

    # -- structure -----------------------------------------------------------

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def pipeline(self) -> TransformPipeline:
        return self._pipeline

    @property
    def cells_rows(self) -> list[list[Cell]]:
        width = self._width
        return [self._cells[r * width : (r + 1) * width] for r in range(self._height)]

    @property
    def columns(self) -> list[list[Cell]]:
        width = self._width
        return [self._cells[c::width] for c in range(width)]

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"Cell ({row}, {col}) is outside a {self._height}x{self._width} table")
        return self._cells[row * self._width + col]

    @property
    def raw(self) -> list[list[Any]]:
        """Cell values of every row, without any mapper applied."""
        return [[cell.value for cell in row] for row in self.cells_rows]

    @property
    def column_names(self) -> list[Any]:
        """Raw values of the header row."""
        return self.raw[0] if self._height else []

    def transpose(self) -> DataTable:
        """Swap rows and columns, keeping the attached mappers."""
        return self._derive(self.columns, self._pipeline)

    def contains_text(self, text: str) -> bool:
        return any(isinstance(cell.value, str) and text in cell.value for cell in self._cells)

    # -- mappers -------------------------------------------------------------

    def map_column(self, column: Any, transform: Callable[[Any], Any], strict: bool = True) -> DataTable:
        """Return a new table converting every body value of *column* with *transform*.

        Nothing runs until a view is materialized.  A strict mapper whose
        column does not exist raises :class:`UnknownColumn` at that point.
        """
        mapper = ColumnMapper(column, transform, strict)
        return self._derive(self.cells_rows, self._pipeline.with_column_mapper(mapper))

    def map_headers(
        self,
        mapping: Mapping[Any, Any] | Sequence[tuple[Any, Any]] | None = None,
        transform: Callable[[Any], Any] | None = None,
    ) -> DataTable:
        """Return a new table renaming headers.

        *mapping* associates exact header names or compiled patterns with new
        names; *transform* renames every header the mapping does not.
        """
        if mapping is None:
            renames: tuple[tuple[Any, Any], ...] = ()
        elif isinstance(mapping, Mapping):
            renames = tuple(mapping.items())
        else:
            renames = tuple((matcher, new_name) for matcher, new_name in mapping)
        header_mapper = HeaderMapper(renames, transform)
        return self._derive(self.cells_rows, self._pipeline.with_header_mapper(header_mapper))

    # -- views ---------------------------------------------------------------

    def materialize(self) -> Materialized:
        """Apply every mapper and return the header row and body rows."""
        return self._pipeline.materialize(self.raw)

    @property
    def headers(self) -> list[Any]:
        """Header row with header mappers applied."""
        if not self._height:
            return []
        headers, _ = self._pipeline.resolve_headers(self.raw[0])
        return headers

    def rows(self, include_header: bool = False) -> list[list[Any]]:
        """Mapped values of the body rows, optionally preceded by the header row."""
        if not self._height:
            return []
        headers, body = self.materialize()
        return [headers, *body] if include_header else body

    def hashes(self) -> list[dict[Any, Any]]:
        """One dict per body row, keyed by mapped header."""
        headers, body = self.materialize()
        return [dict(zip(headers, row)) for row in body]

    def symbolic_hashes(self) -> list[dict[str, Any]]:
        """Like :meth:`hashes`, with keys normalised by :func:`symbolize`."""
        headers, body = self.materialize()
        keys = [symbolize(header) for header in headers]
        return [dict(zip(keys, row)) for row in body]

    def rows_hash(self) -> dict[Any, Any]:
        """Map first-column values to second-column values of a two-column table.

        Header mappers rename the keys and column mappers keyed by a
        first-column value convert that row's value.
        """
        self.verify_table_width(2)
        return self.transpose().hashes()[0]

    def match(self, candidate: str) -> DataTable | None:
        """Return this table if *candidate* is ``"table:"`` plus its comma-joined headers."""
        if not candidate.startswith(TABLE_MATCH_PREFIX):
            return None
        expected = candidate[len(TABLE_MATCH_PREFIX) :].split(",")
        if expected != [display_value(header) for header in self.headers]:
            return None
        return self

    def verify_column(self, name: Any) -> None:
        if find_header(name, self.headers) is None:
            raise UnknownColumn(name)

    def verify_table_width(self, width: int) -> None:
        if self._width != width:
            raise WrongShape(width, self._width)

    # -- comparison ----------------------------------------------------------

    @profile_operation("table.diff", describe=table_shape)
    def diff(self, other: Any, options: DiffOptions | None = None, **flags: bool) -> DataTable:
        """Compare this (expected) table with *other* (actual).

        *other* may be a table or anything :meth:`from_data` accepts.  Mappers
        of both tables are applied first.  Divergence is controlled by
        *options* or the equivalent keyword flags (``missing_row``,
        ``surplus_row``, ``missing_col``, ``surplus_col``, ``misplaced_col``).

        Returns
        -------
        DataTable
            The annotated table when no enabled category diverges.

        Raises
        ------
        Different
            Carrying the annotated table otherwise.
        """
        if options is None:
            options = DiffOptions(**flags)
        elif flags:
            options = DiffOptions(**{**options.model_dump(), **flags})

        target = ensure_table(other)
        grid, report = TableAligner(self.rows(include_header=True), target.rows(include_header=True)).align()
        annotated = DataTable.from_cells(grid)

        failures = report.enabled_by(options)
        if failures:
            logger.debug("Tables differ: %s", ", ".join(failures))
            raise Different(annotated, report)
        return annotated

    # -- rendering -----------------------------------------------------------

    def to_text(self, indent: int | None = None, color: bool | None = None) -> str:
        """Render the table as an indented pipe-delimited block.

        Defaults come from :class:`~table_engine.config.Settings`.
        """
        if indent is None or color is None:
            settings = load_settings()
            indent = settings.default_indent if indent is None else indent
            color = settings.color if color is None else color
        return render_table(self, indent=indent, color=color)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"DataTable({self._height}x{self._width}, mappers={not self._pipeline.is_empty})"


def ensure_table(data: Any) -> DataTable:
    """Coerce *data* to a :class:`DataTable`."""
    return DataTable.from_data(data)

