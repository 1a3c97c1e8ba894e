"""Alignment of two materialized tables into one annotated cell grid.

Columns are aligned first by header value.  Source columns missing from
the target are kept and marked removed; target-only columns are appended
at the end.  Both sides are padded with :class:`SurplusCell` placeholders so
that every row has the same width, then rows are aligned with an LCS edit
script.  Removed rows are marked in place, inserted rows are spliced into
the source grid at the position implied by the script, and a removed row
immediately followed by an inserted row is inspected cell by cell for
values that differ only in type.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from table_engine.diff.lcs import ChangeAction, edit_script
from table_engine.models.cell import Cell, CellStatus, SurplusCell, display_value, values_equal
from table_engine.models.diff import DivergenceReport

logger = logging.getLogger(__name__)

CellGrid = list[list[Cell]]


def _ensure_2d(rows: CellGrid) -> CellGrid:
    return rows if rows else [[]]


def _transpose(rows: CellGrid) -> CellGrid:
    if not rows or not rows[0]:
        return []
    return [list(column) for column in zip(*rows)]


def _untranspose(columns: CellGrid, height: int) -> CellGrid:
    if not columns:
        return _ensure_2d([[] for _ in range(height)])
    return _ensure_2d([list(row) for row in zip(*columns)])


def rows_match(left: Sequence[Cell], right: Sequence[Cell]) -> bool:
    """Row equality for alignment: same width and every cell pair matches."""
    return len(left) == len(right) and all(a.matches(b) for a, b in zip(left, right))


def _is_type_mismatch(left: Cell, right: Cell) -> bool:
    return not values_equal(left.value, right.value) and display_value(left.value) == display_value(
        right.value
    )


class TableAligner:
    """Aligns a source grid against a target grid.

    Parameters
    ----------
    source_rows:
        Materialized values of the expected table, header row first.
    target_rows:
        Materialized values of the actual table, header row first.
    """

    def __init__(self, source_rows: Sequence[Sequence[Any]], target_rows: Sequence[Sequence[Any]]) -> None:
        self._source: CellGrid = _ensure_2d([[Cell(value) for value in row] for row in source_rows])
        self._target: CellGrid = _ensure_2d([[Cell(value) for value in row] for row in target_rows])
        self._original_width = len(self._source[0])
        # Original target index of every header shared with the source, in source order.
        self._shared_positions: list[int] = []
        self._padded_width = self._original_width
        self._row_indices: list[int | None] = []
        self._missing_row = False
        self._surplus_row = False

    def align(self) -> tuple[CellGrid, DivergenceReport]:
        """Run the alignment and return the annotated grid with its divergence report."""
        self._pad_and_match_columns()
        self._padded_width = len(self._source[0])
        self._row_indices = list(range(len(self._target)))
        self._align_rows()
        self._fill_surplus_values()

        report = DivergenceReport(
            missing_row=self._missing_row,
            surplus_row=self._surplus_row,
            missing_col=any(cell.status is CellStatus.REMOVED for cell in self._source[0]),
            surplus_col=self._padded_width > self._original_width,
            misplaced_col=self._shared_positions != sorted(self._shared_positions),
        )
        logger.debug("Aligned tables: %s", report.model_dump())
        return self._source, report

    # -- columns -------------------------------------------------------------

    def _pad_and_match_columns(self) -> None:
        source_columns = _transpose(self._source)
        unmatched = _transpose(self._target)
        unmatched_positions = list(range(len(unmatched)))
        target_height = len(self._target)
        matched: CellGrid = []

        for column in source_columns:
            header = column[0]
            position = next(
                (pos for pos, candidate in enumerate(unmatched) if candidate[0].matches(header)),
                None,
            )
            if position is not None:
                matched.append(unmatched.pop(position))
                self._shared_positions.append(unmatched_positions.pop(position))
                continue

            for cell in column:
                cell.status = CellStatus.REMOVED
            placeholder: list[Cell] = [SurplusCell(None) for _ in range(target_height)]
            placeholder[0].value = header.value
            matched.append(placeholder)

        source_height = len(self._source)
        for _ in unmatched:
            source_columns.append([SurplusCell(None) for _ in range(source_height)])

        logger.debug(
            "Column alignment: %d missing, %d surplus",
            sum(1 for column in matched if column[0].is_placeholder),
            len(unmatched),
        )
        self._source = _untranspose(source_columns, source_height)
        self._target = _untranspose(matched + unmatched, target_height)

    # -- rows ----------------------------------------------------------------

    def _align_rows(self) -> None:
        changes = edit_script(list(self._source), list(self._target), rows_match)
        logger.debug("Row alignment produced %d changes", len(changes))

        inserted = 0
        missing = 0
        missing_row_pos: int | None = None
        last_action: ChangeAction | None = None

        for change in changes:
            if change.action is ChangeAction.REMOVE:
                missing_row_pos = change.position + inserted
                for cell in self._source[missing_row_pos]:
                    cell.status = CellStatus.REMOVED
                self._row_indices.insert(missing_row_pos, None)
                self._missing_row = True
                missing += 1
            else:
                insert_row_pos = change.position + missing
                inserted_row: list[Cell] = change.element
                for cell in inserted_row:
                    cell.status = CellStatus.INSERTED
                self._source.insert(insert_row_pos, inserted_row)
                self._row_indices[insert_row_pos] = None
                if (
                    last_action is ChangeAction.REMOVE
                    and missing_row_pos is not None
                    and insert_row_pos == missing_row_pos + 1
                ):
                    self._flag_type_mismatches(self._source[missing_row_pos], inserted_row)
                self._surplus_row = True
                inserted += 1
            last_action = change.action

    @staticmethod
    def _flag_type_mismatches(removed_row: Sequence[Cell], inserted_row: Sequence[Cell]) -> None:
        for removed_cell, inserted_cell in zip(removed_row, inserted_row):
            if _is_type_mismatch(removed_cell, inserted_cell):
                removed_cell.type_mismatch = True
                inserted_cell.type_mismatch = True

    def _fill_surplus_values(self) -> None:
        """Copy target values into the surplus columns of rows that stayed unchanged."""
        for target_pos, target_row in enumerate(self._target):
            try:
                row_pos = self._row_indices.index(target_pos)
            except ValueError:
                continue
            row = self._source[row_pos]
            for col in range(self._original_width, min(self._padded_width, len(row), len(target_row))):
                row[col].value = target_row[col].value
