"""Unit tests for table_engine.table.data_table."""

from __future__ import annotations

import re

import pytest

from table_engine.errors import (
    AmbiguousHeaderMatch,
    MalformedInput,
    NoHeaderMatch,
    UnknownColumn,
    WrongShape,
)
from table_engine.table.data_table import DataTable, ensure_table

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def table() -> DataTable:
    return DataTable.from_data([["one", "four", "seven"], ["4444", "55555", "666666"]])


@pytest.fixture()
def ant_table() -> DataTable:
    return DataTable.from_data([["ANT", "ANTEATER"], ["4444", "55555"]])


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_from_rows(self, table: DataTable):
        assert table.height == 2
        assert table.width == 3
        assert table.raw == [["one", "four", "seven"], ["4444", "55555", "666666"]]

    def test_from_literal(self):
        t = DataTable.from_data(
            """
            | a | b |
            | c | d |
            """
        )
        assert t.raw == [["a", "b"], ["c", "d"]]

    def test_from_maps_uses_first_map_key_order(self):
        t = DataTable.from_data([{"name": "aslak", "male": "true"}, {"male": "false", "name": "joe"}])
        assert t.raw == [["name", "male"], ["aslak", "true"], ["joe", "false"]]

    def test_from_maps_with_inconsistent_keys(self):
        with pytest.raises(MalformedInput):
            DataTable.from_data([{"name": "aslak"}, {"nom": "joe"}])

    def test_ragged_rows_rejected(self):
        with pytest.raises(MalformedInput, match="Row 1 has 1 cells, expected 2"):
            DataTable.from_data([["a", "b"], ["c"]])

    def test_non_scalar_value_rejected(self):
        with pytest.raises(MalformedInput):
            DataTable.from_data([["a"], [["nested"]]])

    def test_mixed_rows_and_maps_rejected(self):
        with pytest.raises(MalformedInput):
            DataTable.from_data([["a"], {"a": "b"}])

    def test_unsupported_input_rejected(self):
        with pytest.raises(MalformedInput):
            DataTable.from_data(42)

    def test_typed_values_kept(self):
        t = DataTable.from_data([["name", "male", "age", "note"], ["aslak", True, 42, None]])
        assert t.raw[1] == ["aslak", True, 42, None]

    def test_empty_tables(self):
        assert DataTable.from_data([]).height == 0
        empty_row = DataTable.from_data([[]])
        assert empty_row.height == 1
        assert empty_row.width == 0
        assert empty_row.cells_rows == [[]]
        assert empty_row.hashes() == []

    def test_ensure_table_returns_existing_table(self, table: DataTable):
        assert ensure_table(table) is table


# ---------------------------------------------------------------------------
# Row / column dual index
# ---------------------------------------------------------------------------


class TestDualIndex:
    def test_rows(self, table: DataTable):
        assert [cell.value for cell in table.cells_rows[0]] == ["one", "four", "seven"]

    def test_columns(self, table: DataTable):
        assert [cell.value for cell in table.columns[1]] == ["four", "55555"]

    def test_same_cell_objects_in_rows_and_columns(self, table: DataTable):
        for r in range(table.height):
            for c in range(table.width):
                assert table.cells_rows[r][c] is table.columns[c][r]
                assert table.cell(r, c) is table.columns[c][r]

    def test_mutation_visible_through_both_views(self, table: DataTable):
        table.cells_rows[1][2].value = "changed"
        assert table.columns[2][1].value == "changed"

    def test_cells_know_their_position(self, table: DataTable):
        cell = table.columns[2][1]
        assert (cell.row_index, cell.col_index) == (1, 2)

    def test_cell_out_of_range(self, table: DataTable):
        with pytest.raises(IndexError):
            table.cell(2, 0)


# ---------------------------------------------------------------------------
# Conversion views
# ---------------------------------------------------------------------------


class TestViews:
    def test_hashes(self, table: DataTable):
        assert table.hashes() == [{"one": "4444", "four": "55555", "seven": "666666"}]

    def test_rows_excludes_header(self, table: DataTable):
        assert table.rows() == [["4444", "55555", "666666"]]

    def test_rows_with_header(self, table: DataTable):
        assert table.rows(include_header=True) == [["one", "four", "seven"], ["4444", "55555", "666666"]]

    def test_symbolic_hashes(self):
        t = DataTable.from_data([["foo", "Bar", "Foo Bar"], ["1", "22", "333"]])
        assert t.symbolic_hashes() == [{"foo": "1", "bar": "22", "foo_bar": "333"}]

    def test_symbolic_hashes_keep_unicode_letters(self):
        t = DataTable.from_data([["Hellesøy Straße"], ["1"]])
        assert t.symbolic_hashes() == [{"hellesøy_straße": "1"}]

    def test_symbolic_hashes_repeatable(self, table: DataTable):
        first = table.symbolic_hashes()
        assert table.symbolic_hashes() == first

    def test_symbolic_hashes_do_not_disturb_hashes(self, table: DataTable):
        hashes_before = table.hashes()
        rows_before = table.rows()
        table.symbolic_hashes()
        assert table.hashes() == hashes_before
        assert table.rows() == rows_before

    def test_transpose(self, table: DataTable):
        assert table.transpose().hashes()[0] == {"one": "four", "4444": "55555"}

    def test_rows_hash(self):
        t = DataTable.from_data([["one", "1111"], ["two", "22222"]])
        assert t.rows_hash() == {"one": "1111", "two": "22222"}

    def test_rows_hash_requires_two_columns(self):
        t = DataTable.from_data([["one", "1111", "abc"], ["two", "22222", "def"]])
        with pytest.raises(WrongShape, match="The table must have exactly 2 columns"):
            t.rows_hash()

    def test_rows_hash_with_header_and_column_mapping(self):
        t = DataTable.from_data([["one", "1111"], ["two", "22222"]])
        t2 = t.map_headers({"two": "Two"}, str.upper).map_column("two", int, strict=False)
        assert t2.rows_hash() == {"ONE": "1111", "Two": 22222}

    def test_column_names_are_raw(self, ant_table: DataTable):
        renamed = ant_table.map_headers(transform=str.lower)
        assert renamed.column_names == ["ANT", "ANTEATER"]
        assert renamed.headers == ["ant", "anteater"]

    def test_contains_text(self, table: DataTable):
        assert table.contains_text("555")
        assert not table.contains_text("777")

    def test_verify_column(self, table: DataTable):
        table.verify_column("four")
        with pytest.raises(UnknownColumn, match='The column named "two" does not exist'):
            table.verify_column("two")


# ---------------------------------------------------------------------------
# map_column
# ---------------------------------------------------------------------------


class TestMapColumn:
    def test_maps_values(self, table: DataTable):
        assert table.map_column("one", int).hashes()[0]["one"] == 4444

    def test_maps_rows_too(self, table: DataTable):
        row = table.map_column("one", int).rows()[0]
        assert 4444 in row
        assert "4444" not in row

    def test_transform_runs_once_per_value_when_rows_read(self):
        values = ["value"]
        t = DataTable.from_data([["header"], values])
        calls: list[str] = []
        mapped = t.map_column("header", lambda v: calls.append(v))

        assert calls == []
        mapped.rows()
        assert calls == ["value"]

    def test_transform_reruns_on_each_materialization(self):
        t = DataTable.from_data([["header"], ["a"], ["b"]])
        calls: list[str] = []
        mapped = t.map_column("header", lambda v: calls.append(v) or v)
        mapped.hashes()
        mapped.hashes()
        assert calls == ["a", "b", "a", "b"]

    def test_symbolic_column_name(self):
        t = DataTable.from_data([["First Name"], ["ada"]])
        assert t.map_column("first_name", str.upper).hashes() == [{"First Name": "ADA"}]

    def test_non_strict_missing_column_is_ignored(self, table: DataTable):
        assert table.map_column("two", int, strict=False).hashes() == table.hashes()

    def test_strict_missing_column_fails_lazily(self, table: DataTable):
        mapped = table.map_column("two", int, strict=True)
        with pytest.raises(UnknownColumn, match='The column named "two" does not exist'):
            mapped.hashes()

    def test_returns_new_table(self, table: DataTable):
        mapped = table.map_column("one", int)
        assert mapped is not table
        assert table.hashes()[0]["one"] == "4444"

    def test_mappers_compose_in_order(self, table: DataTable):
        mapped = table.map_column("one", int).map_column("one", lambda v: v + 1)
        assert mapped.hashes()[0]["one"] == 4445

    def test_copy_keeps_mappers(self, table: DataTable):
        copied = table.map_column("one", int).copy()
        assert copied.hashes()[0]["one"] == 4444


# ---------------------------------------------------------------------------
# map_headers
# ---------------------------------------------------------------------------


class TestMapHeaders:
    def test_swap_two_headers(self):
        t = DataTable.from_data([["a", "b"], ["1", "2"]])
        swapped = t.map_headers({"a": "b", "b": "a"})
        assert swapped.hashes() == [{"b": "1", "a": "2"}]
        assert swapped.headers == ["b", "a"]

    def test_column_mapper_follows_swap(self):
        t = DataTable.from_data([["a", "b"], ["1", "2"]])
        swapped = t.map_column("a", int).map_headers({"a": "b", "b": "a"})
        assert swapped.hashes() == [{"b": 1, "a": "2"}]

    def test_renames_by_name(self, ant_table: DataTable):
        assert ant_table.map_headers({"ANT": "three"}).hashes()[0]["three"] == "4444"

    def test_renames_by_pattern(self, ant_table: DataTable):
        renamed = ant_table.map_headers({re.compile(r"^ANT$|^BEE$"): "three"})
        assert renamed.hashes()[0]["three"] == "4444"

    def test_column_mappers_follow_renames(self, ant_table: DataTable):
        renamed = ant_table.map_column("ANT", int).map_headers({"ANT": "three"})
        assert renamed.hashes()[0]["three"] == 4444

    def test_column_mapper_on_new_name(self, ant_table: DataTable):
        renamed = ant_table.map_headers({"ANT": "three"}).map_column("three", int)
        assert renamed.hashes()[0]["three"] == 4444

    def test_transform_applies_to_all_headers(self, ant_table: DataTable):
        assert list(ant_table.map_headers(transform=str.lower).hashes()[0]) == ["ant", "anteater"]

    def test_explicit_rename_overrides_transform(self, ant_table: DataTable):
        renamed = ant_table.map_headers({"ANT": "foo"}, str.lower)
        assert list(renamed.hashes()[0]) == ["foo", "anteater"]

    def test_header_mappers_compose_in_order(self, ant_table: DataTable):
        renamed = ant_table.map_headers({"ANT": "ant"}).map_headers({"ant": "insect"})
        assert renamed.headers == ["insect", "ANTEATER"]

    def test_pattern_matching_several_headers_fails(self):
        t = DataTable.from_data([["Cuke", "Duke"], ["Foo", "Bar"]])
        renamed = t.map_headers({re.compile("uk"): "u"})
        with pytest.raises(AmbiguousHeaderMatch, match=re.escape("2 headers matched /uk/: ['Cuke', 'Duke']")):
            renamed.hashes()

    def test_mapping_without_match_fails(self, ant_table: DataTable):
        with pytest.raises(NoHeaderMatch, match="No headers matched 'BEE'"):
            ant_table.map_headers({"BEE": "bee"}).hashes()

    def test_original_table_unchanged(self, ant_table: DataTable):
        ant_table.map_headers({"ANT": "three"})
        assert ant_table.headers == ["ANT", "ANTEATER"]


# ---------------------------------------------------------------------------
# match
# ---------------------------------------------------------------------------


class TestMatch:
    def test_no_match_for_other_headers(self, table: DataTable):
        assert table.match("table:does,not,match") is None

    def test_match_requires_prefix(self, table: DataTable):
        assert table.match("table:one,four,seven") is table
        assert table.match("one,four,seven") is None

    def test_match_uses_mapped_headers(self, table: DataTable):
        renamed = table.map_headers(transform=str.upper)
        assert renamed.match("table:ONE,FOUR,SEVEN") is renamed
