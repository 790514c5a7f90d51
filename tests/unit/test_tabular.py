"""Unit tests for the row, column and hybrid tabular chunkers."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from pydantic import ValidationError

from rag_ingest.chunking.errors import (
    EmptyDocumentError,
    InvalidConfigurationError,
)
from rag_ingest.chunking.models import ChunkSet, NullValue, NumberValue, StringValue
from rag_ingest.chunking.parser import parse_table
from rag_ingest.chunking.tabular import (
    chunk_columns,
    chunk_hybrid,
    chunk_rows,
    chunk_table,
    row_windows,
)


def _assert_contiguous(chunks: ChunkSet) -> None:
    assert [c.metadata.chunk_index for c in chunks] == list(range(len(chunks)))
    assert {c.metadata.total_chunks for c in chunks} == {len(chunks)}


# ── windowing ──────────────────────────────────────────────────────────


class TestRowWindows:
    def test_overlapping_windows(self) -> None:
        assert row_windows(25, 10, 8) == [(0, 10), (8, 18), (16, 25)]

    def test_stops_when_window_reaches_end(self) -> None:
        assert row_windows(10, 10, 8) == [(0, 10)]

    def test_non_positive_step_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            row_windows(10, 10, 0)


# ── row strategy ───────────────────────────────────────────────────────


class TestChunkRows:
    def test_scenario_25_rows(self, make_csv: Callable[..., str]) -> None:
        """25 rows, size 10, overlap 2 → windows [0,10), [8,18), [16,25)."""
        table = parse_table(make_csv(25, 3))
        chunks = chunk_rows(table.headers, table.records, rows_per_chunk=10, overlap_rows=2)
        assert len(chunks) == 3
        assert [(c.metadata.row_start, c.metadata.row_end) for c in chunks] == [
            (0, 9),
            (8, 17),
            (16, 24),
        ]
        _assert_contiguous(chunks)

    def test_total_matches_emitted_when_rows_fill_first_window(
        self, make_csv: Callable[..., str]
    ) -> None:
        table = parse_table(make_csv(10, 2))
        chunks = chunk_rows(table.headers, table.records, rows_per_chunk=10, overlap_rows=2)
        assert len(chunks) == 1
        assert chunks[0].metadata.total_chunks == 1

    @pytest.mark.parametrize(
        ("rows", "size", "overlap"),
        [(1, 10, 2), (7, 3, 1), (25, 10, 2), (33, 5, 4), (40, 10, 0), (11, 1, 0)],
    )
    def test_every_row_covered(
        self, make_csv: Callable[..., str], rows: int, size: int, overlap: int
    ) -> None:
        table = parse_table(make_csv(rows, 2))
        chunks = chunk_rows(table.headers, table.records, rows_per_chunk=size, overlap_rows=overlap)
        covered: set[int] = set()
        for c in chunks:
            assert c.metadata.row_end <= rows - 1
            covered.update(range(c.metadata.row_start, c.metadata.row_end + 1))
        assert covered == set(range(rows))
        _assert_contiguous(chunks)

    def test_rendering_with_headers(self) -> None:
        table = parse_table("name,age\nAlice,30\nBob,\n")
        [chunk] = chunk_rows(table.headers, table.records)
        assert chunk.content == (
            "Data columns: name, age\n"
            "---\n"
            "Row 1: name: Alice, age: 30\n"
            "Row 2: name: Bob"
        )
        assert chunk.metadata.column_count == 2
        assert chunk.metadata.headers == ("name", "age")

    def test_rendering_without_headers(self) -> None:
        table = parse_table("name,active\nAlice,true\n")
        [chunk] = chunk_rows(table.headers, table.records, include_headers=False)
        assert chunk.content == "Row 1: name: Alice, active: true"

    def test_rows_numbered_within_chunk(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(6, 1))
        chunks = chunk_rows(
            table.headers, table.records, rows_per_chunk=4, overlap_rows=1, include_headers=False
        )
        assert chunks[1].content.splitlines()[0] == "Row 1: col0: r3c0"

    def test_blank_row_omitted_but_numbered(self) -> None:
        headers = ("a", "b")
        records = [
            {"a": NumberValue(value=1), "b": StringValue(value="x")},
            {"a": NullValue(), "b": StringValue(value="")},
            {"a": NumberValue(value=3), "b": NullValue()},
        ]
        [chunk] = chunk_rows(headers, records, include_headers=False)
        assert chunk.content == "Row 1: a: 1, b: x\nRow 3: a: 3"

    @pytest.mark.parametrize(("size", "overlap"), [(10, 10), (10, 12), (0, 0), (5, -1)])
    def test_invalid_configuration(
        self, make_csv: Callable[..., str], size: int, overlap: int
    ) -> None:
        table = parse_table(make_csv(5, 2))
        with pytest.raises(InvalidConfigurationError):
            chunk_rows(table.headers, table.records, rows_per_chunk=size, overlap_rows=overlap)

    def test_invalid_configuration_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            chunk_rows(("a",), [{"a": NumberValue(value=1)}], rows_per_chunk=2, overlap_rows=2)

    def test_no_records_is_empty(self) -> None:
        with pytest.raises(EmptyDocumentError):
            chunk_rows(("a", "b"), [])

    def test_idempotent(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(17, 4))
        first = chunk_rows(table.headers, table.records, rows_per_chunk=5, overlap_rows=2)
        second = chunk_rows(table.headers, table.records, rows_per_chunk=5, overlap_rows=2)
        assert first == second

    def test_chunks_are_frozen(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(3, 2))
        chunk = chunk_rows(table.headers, table.records)[0]
        with pytest.raises(ValidationError):
            chunk.metadata.total_chunks = 99  # type: ignore[misc]


# ── column strategy ────────────────────────────────────────────────────


class TestChunkColumns:
    def test_scenario_12_headers(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(4, 12))
        chunks = chunk_columns(table.headers, table.records, columns_per_chunk=5)
        assert [c.metadata.column_count for c in chunks] == [5, 5, 2]
        assert [len(c.metadata.headers) for c in chunks] == [5, 5, 2]
        _assert_contiguous(chunks)

    def test_groups_disjoint_and_complete(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(3, 7))
        chunks = chunk_columns(table.headers, table.records, columns_per_chunk=3)
        seen: list[str] = [h for c in chunks for h in c.metadata.headers]
        assert seen == list(table.headers)

    def test_every_chunk_spans_all_rows(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(8, 6))
        for c in chunk_columns(table.headers, table.records, columns_per_chunk=4):
            assert (c.metadata.row_start, c.metadata.row_end) == (0, 7)

    def test_rendering(self) -> None:
        table = parse_table("a,b,c\n1,,x\n2,y,\n")
        chunks = chunk_columns(table.headers, table.records, columns_per_chunk=2)
        assert chunks[0].content == "Columns: a, b\n---\nRow 1: a: 1\nRow 2: a: 2, b: y"
        assert chunks[1].content == "Columns: c\n---\nRow 1: c: x"

    def test_invalid_group_size(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(2, 2))
        with pytest.raises(InvalidConfigurationError):
            chunk_columns(table.headers, table.records, columns_per_chunk=0)

    def test_idempotent(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(9, 11))
        first = chunk_columns(table.headers, table.records, columns_per_chunk=4)
        second = chunk_columns(table.headers, table.records, columns_per_chunk=4)
        assert first == second


# ── hybrid strategy ────────────────────────────────────────────────────


class TestChunkHybrid:
    def test_column_major_order(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(25, 12))
        chunks = chunk_hybrid(table.headers, table.records, rows_per_chunk=10, columns_per_chunk=5)
        assert len(chunks) == 9
        _assert_contiguous(chunks)
        assert [(c.metadata.row_start, c.metadata.row_end) for c in chunks[:3]] == [
            (0, 9),
            (10, 19),
            (20, 24),
        ]
        assert chunks[0].metadata.headers == chunks[2].metadata.headers
        assert chunks[3].metadata.headers == ("col5", "col6", "col7", "col8", "col9")

    def test_rows_numbered_absolutely(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(15, 2))
        chunks = chunk_hybrid(table.headers, table.records, rows_per_chunk=10, columns_per_chunk=2)
        lines = chunks[1].content.splitlines()
        assert lines[0] == "Columns: col0, col1"
        assert lines[1] == "---"
        assert lines[2] == "Row 11: col0: r10c0, col1: r10c1"

    def test_groups_disjoint_per_row_window(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(13, 9))
        chunks = chunk_hybrid(table.headers, table.records, rows_per_chunk=4, columns_per_chunk=4)
        by_window: dict[tuple[int, int], list[str]] = {}
        for c in chunks:
            key = (c.metadata.row_start, c.metadata.row_end)
            by_window.setdefault(key, []).extend(c.metadata.headers)
        for headers in by_window.values():
            assert headers == list(table.headers)

    def test_idempotent(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(23, 7))
        first = chunk_hybrid(table.headers, table.records, rows_per_chunk=5, columns_per_chunk=3)
        second = chunk_hybrid(table.headers, table.records, rows_per_chunk=5, columns_per_chunk=3)
        assert first == second

    def test_row_windows_do_not_overlap(self, make_csv: Callable[..., str]) -> None:
        table = parse_table(make_csv(23, 1))
        chunks = chunk_hybrid(table.headers, table.records, rows_per_chunk=5, columns_per_chunk=1)
        starts = [c.metadata.row_start for c in chunks]
        ends = [c.metadata.row_end for c in chunks]
        assert starts == [0, 5, 10, 15, 20]
        assert ends == [4, 9, 14, 19, 22]

    @pytest.mark.parametrize(("rows", "cols"), [(0, 5), (5, 0), (-1, 1)])
    def test_invalid_configuration(
        self, make_csv: Callable[..., str], rows: int, cols: int
    ) -> None:
        table = parse_table(make_csv(3, 3))
        with pytest.raises(InvalidConfigurationError):
            chunk_hybrid(table.headers, table.records, rows_per_chunk=rows, columns_per_chunk=cols)


# ── dispatcher ─────────────────────────────────────────────────────────


class TestChunkTable:
    def test_default_is_row(self, make_csv: Callable[..., str]) -> None:
        chunks = chunk_table(make_csv(25, 3))
        assert len(chunks) == 3
        assert chunks[0].content.startswith("Data columns:")

    @pytest.mark.parametrize("strategy", ["column", "hybrid"])
    def test_string_strategy(self, make_csv: Callable[..., str], strategy: str) -> None:
        chunks = chunk_table(make_csv(5, 12), strategy, columns_per_chunk=5)
        assert chunks[0].content.startswith("Columns: col0, col1, col2, col3, col4")

    def test_tsv(self, make_csv: Callable[..., str]) -> None:
        chunks = chunk_table(make_csv(3, 2, delimiter="\t"), "row", delimiter="\t")
        assert chunks[0].metadata.headers == ("col0", "col1")

    def test_unknown_strategy(self, make_csv: Callable[..., str]) -> None:
        with pytest.raises(InvalidConfigurationError):
            chunk_table(make_csv(3, 2), "diagonal")

    def test_option_not_accepted_by_strategy(self, make_csv: Callable[..., str]) -> None:
        with pytest.raises(InvalidConfigurationError):
            chunk_table(make_csv(3, 2), "column", overlap_rows=1)

    def test_header_only_document(self) -> None:
        with pytest.raises(EmptyDocumentError):
            chunk_table("a,b,c\n")
