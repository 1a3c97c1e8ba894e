"""Parser for pipe-delimited table literals.

Each non-blank line is one row written as ``| a | b | c |``.  Cells are
trimmed; ``\\|``, ``\\n`` and ``\\\\`` inside a cell decode to a pipe, a
newline and a backslash.
"""

from __future__ import annotations

import logging

from table_engine.errors import MalformedInput

logger = logging.getLogger(__name__)

_ESCAPES = {"|": "|", "n": "\n", "\\": "\\"}


def _split_row(line: str, line_number: int) -> list[str]:
    if not (line.startswith("|") and line.endswith("|")) or len(line) < 2:
        raise MalformedInput(f"Line {line_number} is not a table row: {line!r}")

    cells: list[str] = []
    current: list[str] = []
    chars = iter(line[1:])
    for char in chars:
        if char == "\\":
            nxt = next(chars, "")
            if nxt in _ESCAPES:
                current.append(_ESCAPES[nxt])
            else:
                current.append(char + nxt)
        elif char == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    # The trailing pipe may have been consumed as an escape.
    if current:
        raise MalformedInput(f"Line {line_number} has an unterminated cell: {line!r}")
    return cells


def parse_table_literal(text: str) -> list[list[str]]:
    """Parse a table literal into rows of raw string cells.

    Blank lines are ignored.  Raises :class:`MalformedInput` when a line is
    not a pipe-delimited row.
    """
    rows: list[list[str]] = []
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        rows.append(_split_row(line, number))

    logger.debug("Parsed table literal with %d rows", len(rows))
    return rows
