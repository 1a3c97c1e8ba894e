"""Exception hierarchy for the table engine.

Every error is raised where a view is materialized or a comparison runs,
never when a mapper is attached.  Only :class:`Different` is an expected
outcome; the rest indicate misuse of a table.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from table_engine.models.diff import DivergenceReport
    from table_engine.table.data_table import DataTable


def describe_matcher(matcher: Any) -> str:
    """Return a readable form of a header matcher (string or compiled pattern)."""
    pattern = getattr(matcher, "pattern", None)
    if pattern is not None:
        return f"/{pattern}/"
    return repr(matcher)


class TableEngineError(Exception):
    """Base exception for all table engine errors."""


class MalformedInput(TableEngineError):
    """Construction input is not a rectangular table of scalar values."""


class UnknownColumn(TableEngineError):
    """A strict column mapper targets a header that does not exist."""

    def __init__(self, name: Any) -> None:
        self.name = name
        super().__init__(f'The column named "{name}" does not exist')


class NoHeaderMatch(TableEngineError):
    """An explicit header mapping matched none of the headers."""

    def __init__(self, matcher: Any) -> None:
        self.matcher = matcher
        super().__init__(f"No headers matched {describe_matcher(matcher)}")


class AmbiguousHeaderMatch(TableEngineError):
    """A header mapping matched more than one header."""

    def __init__(self, matcher: Any, matched_names: Sequence[Any]) -> None:
        self.matcher = matcher
        self.matched_names = list(matched_names)
        super().__init__(
            f"{len(self.matched_names)} headers matched {describe_matcher(matcher)}: "
            f"{self.matched_names!r}"
        )


class WrongShape(TableEngineError):
    """The table does not have the column count an operation requires."""

    def __init__(self, expected_width: int, actual_width: int | None = None) -> None:
        self.expected_width = expected_width
        self.actual_width = actual_width
        super().__init__(f"The table must have exactly {expected_width} columns")


class Different(TableEngineError):
    """Two tables diverged in at least one enabled category.

    Carries the annotated table so callers can render the full diff, and
    the :class:`DivergenceReport` describing which categories were found.
    """

    def __init__(self, table: DataTable, report: DivergenceReport | None = None) -> None:
        self.table = table
        self.report = report
        super().__init__(f"Tables were not identical:{table.to_text(indent=2, color=False)}")
