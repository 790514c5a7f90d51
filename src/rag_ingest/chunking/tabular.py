"""Row, column and hybrid chunking of parsed tabular documents.

Every strategy returns a ChunkSet whose ``chunk_index`` values run
``0..total_chunks-1`` in emission order.  ``total_chunks`` is always the
length of the produced sequence, never a separately computed estimate.

Usage::

    from rag_ingest.chunking import chunk_table

    chunks = chunk_table(raw_csv, strategy="hybrid", rows_per_chunk=20)
    for c in chunks:
        print(c.metadata.chunk_index, c.content[:80])
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator, Sequence
from typing import Any

from rag_ingest.chunking.errors import (
    EmptyDocumentError,
    InvalidConfigurationError,
    MalformedDocumentError,
)
from rag_ingest.chunking.models import (
    Chunk,
    ChunkMetadata,
    ChunkSet,
    ChunkStrategy,
    Record,
)
from rag_ingest.chunking.parser import parse_table
from rag_ingest.chunking.render import render_block

logger = logging.getLogger(__name__)


# ── validation / windowing helpers ──────────────────────────────────────


def _require_positive(name: str, value: int) -> None:
    if value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value}")


def _check_table(headers: Sequence[str], records: Sequence[Record]) -> None:
    if not headers:
        raise MalformedDocumentError("Document has no columns")
    if not records:
        raise EmptyDocumentError("Document has no data rows")


def row_windows(total_rows: int, size: int, step: int) -> list[tuple[int, int]]:
    """Return half-open ``(start, end)`` row windows.

    Stops at the first window that reaches *total_rows*, so there is never
    an empty trailing window.
    """
    if step <= 0:
        raise InvalidConfigurationError(f"window step must be positive, got {step}")
    windows: list[tuple[int, int]] = []
    start = 0
    while start < total_rows:
        end = min(start + size, total_rows)
        windows.append((start, end))
        if end >= total_rows:
            break
        start += step
    return windows


def column_groups(headers: Sequence[str], size: int) -> Iterator[tuple[str, ...]]:
    """Yield contiguous, non-overlapping header slices of *size* (last may be shorter)."""
    for i in range(0, len(headers), size):
        yield tuple(headers[i : i + size])


# ── strategies ──────────────────────────────────────────────────────────


def chunk_rows(
    headers: Sequence[str],
    records: Sequence[Record],
    rows_per_chunk: int = 10,
    overlap_rows: int = 2,
    include_headers: bool = True,
) -> ChunkSet:
    """Split rows into overlapping windows, every chunk carrying all columns.

    Parameters
    ----------
    headers:
        Column names in document order.
    records:
        Parsed rows.
    rows_per_chunk:
        Window size.
    overlap_rows:
        Rows shared between consecutive windows; must be ``< rows_per_chunk``.
    include_headers:
        Prefix each chunk with a ``Data columns:`` line.

    Returns
    -------
    ChunkSet
        One chunk per window, rows numbered from 1 within each chunk.
    """
    _require_positive("rows_per_chunk", rows_per_chunk)
    if overlap_rows < 0:
        raise InvalidConfigurationError(f"overlap_rows must be >= 0, got {overlap_rows}")
    if overlap_rows >= rows_per_chunk:
        raise InvalidConfigurationError(
            f"overlap_rows ({overlap_rows}) must be < rows_per_chunk ({rows_per_chunk})"
        )
    _check_table(headers, records)

    headers = tuple(headers)
    windows = row_windows(len(records), rows_per_chunk, rows_per_chunk - overlap_rows)
    title = f"Data columns: {', '.join(headers)}" if include_headers else None

    chunks: ChunkSet = []
    for index, (start, end) in enumerate(windows):
        chunks.append(
            Chunk(
                content=render_block(title, headers, records[start:end]),
                metadata=ChunkMetadata(
                    chunk_index=index,
                    total_chunks=len(windows),
                    row_start=start,
                    row_end=end - 1,
                    column_count=len(headers),
                    headers=headers,
                ),
            )
        )

    logger.debug(
        "Row chunking: %d rows -> %d chunks (size=%d, overlap=%d)",
        len(records), len(chunks), rows_per_chunk, overlap_rows,
    )
    return chunks


def chunk_columns(
    headers: Sequence[str],
    records: Sequence[Record],
    columns_per_chunk: int = 5,
) -> ChunkSet:
    """Split columns into groups; every chunk spans all rows."""
    _require_positive("columns_per_chunk", columns_per_chunk)
    _check_table(headers, records)

    groups = list(column_groups(headers, columns_per_chunk))
    chunks: ChunkSet = []
    for index, group in enumerate(groups):
        chunks.append(
            Chunk(
                content=render_block(f"Columns: {', '.join(group)}", group, records),
                metadata=ChunkMetadata(
                    chunk_index=index,
                    total_chunks=len(groups),
                    row_start=0,
                    row_end=len(records) - 1,
                    column_count=len(group),
                    headers=group,
                ),
            )
        )

    logger.debug(
        "Column chunking: %d columns -> %d chunks", len(headers), len(chunks)
    )
    return chunks


def chunk_hybrid(
    headers: Sequence[str],
    records: Sequence[Record],
    rows_per_chunk: int = 10,
    columns_per_chunk: int = 10,
) -> ChunkSet:
    """Column groups outer, non-overlapping row windows inner.

    Chunks are generated with a provisional total, then rebuilt with
    ``total_chunks`` equal to the final count.
    """
    _require_positive("rows_per_chunk", rows_per_chunk)
    _require_positive("columns_per_chunk", columns_per_chunk)
    _check_table(headers, records)

    windows = row_windows(len(records), rows_per_chunk, rows_per_chunk)
    draft: ChunkSet = []
    for group in column_groups(headers, columns_per_chunk):
        title = f"Columns: {', '.join(group)}"
        for start, end in windows:
            index = len(draft)
            draft.append(
                Chunk(
                    content=render_block(
                        title, group, records[start:end], first_row_number=start + 1
                    ),
                    metadata=ChunkMetadata(
                        chunk_index=index,
                        total_chunks=index + 1,
                        row_start=start,
                        row_end=end - 1,
                        column_count=len(group),
                        headers=group,
                    ),
                )
            )

    chunks = [chunk.with_total(len(draft)) for chunk in draft]
    logger.debug(
        "Hybrid chunking: %d rows x %d columns -> %d chunks",
        len(records), len(headers), len(chunks),
    )
    return chunks


# ── dispatcher ──────────────────────────────────────────────────────────


def chunk_table(
    data: str | bytes,
    strategy: ChunkStrategy | str = ChunkStrategy.ROW,
    *,
    delimiter: str = ",",
    **options: Any,
) -> ChunkSet:
    """Parse *data* and chunk it with exactly one *strategy*.

    *options* are forwarded to the strategy function (``rows_per_chunk``,
    ``overlap_rows``, ``include_headers``, ``columns_per_chunk``).
    """
    try:
        strategy = ChunkStrategy(strategy)
    except ValueError as exc:
        raise InvalidConfigurationError(f"Unknown chunking strategy {strategy!r}") from exc

    table = parse_table(data, delimiter=delimiter)
    func = _STRATEGIES[strategy]
    accepted = set(inspect.signature(func).parameters) - {"headers", "records"}
    unknown = sorted(set(options) - accepted)
    if unknown:
        raise InvalidConfigurationError(
            f"Invalid options for {strategy.value} strategy: {', '.join(unknown)}"
        )
    return func(table.headers, table.records, **options)


_STRATEGIES = {
    ChunkStrategy.ROW: chunk_rows,
    ChunkStrategy.COLUMN: chunk_columns,
    ChunkStrategy.HYBRID: chunk_hybrid,
}
