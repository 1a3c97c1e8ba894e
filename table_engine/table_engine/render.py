"""Text rendering of tables and diff results.

Each cell is printed as a four-character status marker followed by its
value padded to the column width.  Removed cells are marked ``(-)``,
inserted and placeholder cells ``(+)``; cells whose counterpart differs
only in type show their type-revealing form, e.g. ``(i) "true"``.

With ``color=True`` the same text is styled through :mod:`rich` and
emitted as ANSI escape sequences; the characters are identical.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from table_engine.models.cell import Cell, CellStatus
from table_engine.telemetry.profiling import profile_operation, table_shape

if TYPE_CHECKING:
    from table_engine.table.data_table import DataTable

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Status markers and styles
# ---------------------------------------------------------------------------

STATUS_PREFIXES: dict[CellStatus, str] = {
    CellStatus.UNCHANGED: "    ",
    CellStatus.REMOVED: "(-) ",
    CellStatus.INSERTED: "(+) ",
}

_STATUS_STYLES: dict[CellStatus, str] = {
    CellStatus.UNCHANGED: "",
    CellStatus.REMOVED: "yellow",
    CellStatus.INSERTED: "bright_black",
}

_TYPE_MISMATCH_STYLE = "bold"


def escape_cell(text: str) -> str:
    """Escape backslashes, newlines and pipes so a cell stays on one line."""
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace("|", "\\|")


def cell_text(cell: Cell) -> str:
    return escape_cell(cell.text)


def column_widths(rows: Sequence[Sequence[Cell]]) -> list[int]:
    """Widest printed value per column."""
    if not rows:
        return []
    return [max(len(cell_text(row[col])) for row in rows) for col in range(len(rows[0]))]


def _cell_style(cell: Cell) -> str:
    style = _STATUS_STYLES[cell.status]
    if cell.type_mismatch:
        style = f"{style} {_TYPE_MISMATCH_STYLE}".strip()
    return style


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_plain(rows: Sequence[Sequence[Cell]], widths: list[int], indent: int) -> str:
    lines = []
    for row in rows:
        cells = [f"{STATUS_PREFIXES[cell.status]}{cell_text(cell).ljust(width)} " for cell, width in zip(row, widths)]
        lines.append(" " * indent + "| " + "| ".join(cells) + "|")
    return "\n".join(lines)


def _render_ansi(rows: Sequence[Sequence[Cell]], widths: list[int], indent: int) -> str:
    text = Text()
    for number, row in enumerate(rows):
        if number:
            text.append("\n")
        text.append(" " * indent + "| ")
        for position, (cell, width) in enumerate(zip(row, widths)):
            if position:
                text.append("| ")
            text.append(f"{STATUS_PREFIXES[cell.status]}{cell_text(cell).ljust(width)}", style=_cell_style(cell))
            text.append(" ")
        text.append("|")

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="standard",
        highlight=False,
        soft_wrap=True,
    )
    console.print(text, end="")
    return buffer.getvalue()


@profile_operation("table.render", describe=table_shape)
def render_table(table: DataTable, indent: int = 2, color: bool = False) -> str:
    """Render *table* as a block of pipe-delimited lines.

    Parameters
    ----------
    table:
        The table to render, typically the annotated result of a diff.
    indent:
        Number of spaces before every line.  The block ends with a newline
        followed by ``indent - 2`` spaces.
    color:
        Emit ANSI styling.  ``False`` yields plain text.

    Returns
    -------
    str
        The rendered block, starting with a newline.
    """
    if indent < 0:
        raise ValueError(f"indent must be >= 0, got {indent}")

    rows = table.cells_rows
    widths = column_widths(rows)
    body = _render_ansi(rows, widths, indent) if color else _render_plain(rows, widths, indent)
    logger.debug("Rendered %dx%d table (color=%s)", table.height, table.width, color)
    return "\n" + body + "\n" + " " * max(indent - 2, 0)
