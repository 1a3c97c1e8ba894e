"""Longest-common-subsequence edit scripts over arbitrary sequences.

Equality is supplied by the caller and need not be transitive: row
alignment treats placeholder cells as wildcards.  Common prefixes and
suffixes are matched first, then the remaining middle is solved with a
dynamic-programming table that prefers the earliest possible match.

The edit script is grouped into hunks.  Inside a hunk every removal comes
before the insertions that precede the next match; after the last match
removals and insertions alternate, pairing leftover rows one to one.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

Equality = Callable[[Any, Any], bool]


class ChangeAction(str, enum.Enum):
    REMOVE = "-"
    INSERT = "+"


@dataclass(frozen=True)
class Change:
    """One element removed from the old sequence or inserted from the new one.

    ``position`` indexes the old sequence for removals and the new sequence
    for insertions.
    """

    action: ChangeAction
    position: int
    element: Any

    def __repr__(self) -> str:
        return f"Change({self.action.value}{self.position}: {self.element!r})"


def lcs_matches(old: Sequence[Any], new: Sequence[Any], eq: Equality) -> list[int | None]:
    """Compute a longest common subsequence as a match vector.

    ``result[i]`` is the index in *new* aligned with ``old[i]``, or ``None``.
    The vector stops at the last matched element of *old*.
    """
    vector: dict[int, int] = {}

    start = 0
    while start < len(old) and start < len(new) and eq(old[start], new[start]):
        vector[start] = start
        start += 1

    old_end, new_end = len(old) - 1, len(new) - 1
    while old_end >= start and new_end >= start and eq(old[old_end], new[new_end]):
        vector[old_end] = new_end
        old_end -= 1
        new_end -= 1

    rows = old_end - start + 1
    cols = new_end - start + 1
    if rows > 0 and cols > 0:
        equal = [[eq(old[start + i], new[start + j]) for j in range(cols)] for i in range(rows)]
        # lengths[i][j]: LCS length of old[start+i:] and new[start+j:] within the middle
        lengths = [[0] * (cols + 1) for _ in range(rows + 1)]
        for i in range(rows - 1, -1, -1):
            for j in range(cols - 1, -1, -1):
                if equal[i][j]:
                    lengths[i][j] = lengths[i + 1][j + 1] + 1
                else:
                    lengths[i][j] = max(lengths[i + 1][j], lengths[i][j + 1])

        i = j = 0
        while i < rows and j < cols:
            if equal[i][j]:
                vector[start + i] = start + j
                i += 1
                j += 1
            elif lengths[i + 1][j] >= lengths[i][j + 1]:
                i += 1
            else:
                j += 1

    if not vector:
        return []
    return [vector.get(i) for i in range(max(vector) + 1)]


def diff_hunks(old: Sequence[Any], new: Sequence[Any], eq: Equality) -> list[list[Change]]:
    """Return the edit script turning *old* into *new*, grouped into hunks."""
    matches = lcs_matches(old, new, eq)
    hunks: list[list[Change]] = []
    hunk: list[Change] = []

    new_pos = 0
    for old_pos, match in enumerate(matches):
        if match is None:
            hunk.append(Change(ChangeAction.REMOVE, old_pos, old[old_pos]))
            continue
        while new_pos < match:
            hunk.append(Change(ChangeAction.INSERT, new_pos, new[new_pos]))
            new_pos += 1
        if hunk:
            hunks.append(hunk)
            hunk = []
        new_pos += 1

    old_pos = len(matches)
    old_size, new_size = len(old), len(new)
    while old_pos < old_size or new_pos < new_size:
        if old_pos == old_size:
            while new_pos < new_size:
                hunk.append(Change(ChangeAction.INSERT, new_pos, new[new_pos]))
                new_pos += 1
        if new_pos == new_size:
            while old_pos < old_size:
                hunk.append(Change(ChangeAction.REMOVE, old_pos, old[old_pos]))
                old_pos += 1
        if old_pos < old_size:
            hunk.append(Change(ChangeAction.REMOVE, old_pos, old[old_pos]))
            old_pos += 1
        if new_pos < new_size:
            hunk.append(Change(ChangeAction.INSERT, new_pos, new[new_pos]))
            new_pos += 1

    if hunk:
        hunks.append(hunk)
    return hunks


def edit_script(old: Sequence[Any], new: Sequence[Any], eq: Equality) -> list[Change]:
    """Flattened :func:`diff_hunks`."""
    return [change for hunk in diff_hunks(old, new, eq) for change in hunk]
