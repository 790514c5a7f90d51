"""Shared rendering of tabular rows into embeddable text."""

from __future__ import annotations

from collections.abc import Sequence

from rag_ingest.chunking.models import Record, is_blank

SEPARATOR = "---"


def render_row(headers: Sequence[str], record: Record) -> str:
    """Render ``"<header>: <value>, ..."`` skipping null/absent/empty cells."""
    parts = [
        f"{header}: {record[header].render()}"
        for header in headers
        if not is_blank(record.get(header))
    ]
    return ", ".join(parts)


def render_block(
    title: str | None,
    headers: Sequence[str],
    records: Sequence[Record],
    *,
    first_row_number: int = 1,
) -> str:
    """Render an optional title line, a separator and one line per row.

    Rows are numbered from *first_row_number*; a row with nothing to show
    emits no line but still consumes its number.
    """
    lines: list[str] = []
    if title is not None:
        lines.append(title)
        lines.append(SEPARATOR)
    for offset, record in enumerate(records):
        body = render_row(headers, record)
        if body:
            lines.append(f"Row {first_row_number + offset}: {body}")
    return "\n".join(lines)
