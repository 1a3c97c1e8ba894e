"""Row and column alignment of two tables."""

from table_engine.diff.aligner import TableAligner, rows_match
from table_engine.diff.lcs import Change, ChangeAction, diff_hunks, edit_script, lcs_matches

__all__ = [
    "Change",
    "ChangeAction",
    "TableAligner",
    "diff_hunks",
    "edit_script",
    "lcs_matches",
    "rows_match",
]
