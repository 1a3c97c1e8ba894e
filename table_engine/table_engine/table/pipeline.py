"""Deferred column and header transformations attached to a table.

A :class:`TransformPipeline` is an immutable list of mapper descriptors.
Nothing is evaluated when a mapper is attached; :meth:`TransformPipeline.materialize`
folds the descriptors over the raw cell values every time a view is built,
so repeated materialization neither caches results nor mutates the table.

Header mappers run first, in attachment order.  Column mappers are keyed by
header name and follow renames: a mapper registered for ``"ANT"`` keeps
applying after ``"ANT"`` is renamed to ``"three"``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, NamedTuple

from table_engine.errors import AmbiguousHeaderMatch, NoHeaderMatch, UnknownColumn
from table_engine.models.cell import display_value

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[\W_]+")


def symbolize(name: Any) -> str:
    """Normalise a header into a symbolic key: ``"Foo Bar"`` becomes ``"foo_bar"``."""
    return _NON_WORD_RE.sub("_", display_value(name).lower()).strip("_")


def header_matches(matcher: Any, header: Any) -> bool:
    """Return ``True`` if *matcher* (a string or compiled pattern) selects *header*."""
    if isinstance(matcher, re.Pattern):
        return matcher.search(display_value(header)) is not None
    return bool(matcher == header)


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnMapper:
    """Transform applied to every body value of the column named *column*."""

    column: Any
    transform: Callable[[Any], Any]
    strict: bool = True


@dataclass(frozen=True)
class HeaderMapper:
    """Renames headers by exact name or pattern, optionally transforming the rest.

    An explicit rename wins over *transform* for the header it matches.  All
    matchers see the headers as they were before this mapper ran, so
    ``{"a": "b", "b": "a"}`` swaps two columns.
    """

    renames: tuple[tuple[Any, Any], ...] = ()
    transform: Callable[[Any], Any] | None = None

    def apply(self, headers: list[Any], keys: list[Any]) -> None:
        """Rewrite *headers* in place and re-key column mapper *keys* to match."""
        original = list(headers)
        new_names: dict[int, Any] = {}

        for matcher, new_name in self.renames:
            hits = [pos for pos, header in enumerate(original) if header_matches(matcher, header)]
            if not hits:
                raise NoHeaderMatch(matcher)
            if len(hits) > 1:
                raise AmbiguousHeaderMatch(matcher, [original[pos] for pos in hits])
            new_names[hits[0]] = new_name

        if self.transform is not None:
            for pos, old_name in enumerate(original):
                if pos not in new_names:
                    new_names[pos] = self.transform(old_name)

        for pos, new_name in new_names.items():
            headers[pos] = new_name
        for idx, key in enumerate(keys):
            pos = next((pos for pos, old_name in enumerate(original) if old_name == key and pos in new_names), None)
            if pos is not None:
                keys[idx] = new_names[pos]


def find_header(key: Any, headers: Sequence[Any]) -> Any | None:
    """Find the header a column key refers to: exact name first, then symbolic name."""
    for header in headers:
        if header == key:
            return header
    symbolic = symbolize(key)
    for header in headers:
        if symbolize(header) == symbolic:
            return header
    return None


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Materialized(NamedTuple):
    """Pipeline-applied header row and body rows of a table."""

    headers: list[Any]
    body: list[list[Any]]


@dataclass(frozen=True)
class TransformPipeline:
    """Ordered, immutable set of header and column mappers."""

    column_mappers: tuple[ColumnMapper, ...] = ()
    header_mappers: tuple[HeaderMapper, ...] = ()

    def with_column_mapper(self, mapper: ColumnMapper) -> TransformPipeline:
        return replace(self, column_mappers=self.column_mappers + (mapper,))

    def with_header_mapper(self, mapper: HeaderMapper) -> TransformPipeline:
        return replace(self, header_mappers=self.header_mappers + (mapper,))

    @property
    def is_empty(self) -> bool:
        return not self.column_mappers and not self.header_mappers

    def resolve_headers(self, raw_headers: Sequence[Any]) -> tuple[list[Any], list[Any]]:
        """Apply header mappers to *raw_headers*.

        Returns the mapped headers and, in column mapper order, the header
        name each column mapper now refers to (``None`` when it matches no
        header).  Strict column mappers without a header raise
        :class:`UnknownColumn`.
        """
        headers = list(raw_headers)
        keys: list[Any] = []
        for mapper in self.column_mappers:
            found = find_header(mapper.column, headers)
            keys.append(mapper.column if found is None else found)
        for header_mapper in self.header_mappers:
            header_mapper.apply(headers, keys)

        resolved: list[Any] = []
        for mapper, key in zip(self.column_mappers, keys):
            target = find_header(key, headers)
            if target is None and mapper.strict:
                raise UnknownColumn(mapper.column)
            resolved.append(target)
        return headers, resolved

    def materialize(self, raw_rows: Sequence[Sequence[Any]]) -> Materialized:
        """Fold every mapper over *raw_rows*.

        Each column transform runs exactly once per body value of its
        column, on every call.
        """
        if not raw_rows:
            return Materialized([], [])

        headers, targets = self.resolve_headers(raw_rows[0])
        transforms: list[list[Callable[[Any], Any]]] = [[] for _ in headers]
        for mapper, target in zip(self.column_mappers, targets):
            if target is None:
                logger.debug("Column mapper for %r matched no header; skipped", mapper.column)
                continue
            for pos, header in enumerate(headers):
                if header == target:
                    transforms[pos].append(mapper.transform)

        body = [[_fold(transforms[pos], value) for pos, value in enumerate(row)] for row in raw_rows[1:]]
        return Materialized(headers, body)


def _fold(transforms: list[Callable[[Any], Any]], value: Any) -> Any:
    for transform in transforms:
        value = transform(value)
    return value
