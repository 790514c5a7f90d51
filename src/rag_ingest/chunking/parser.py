"""Tabular parser — delimited text to ordered headers and typed records.

Two failure policies apply:

* structural problems (a row with the wrong number of fields, an
  unterminated quote, undecodable bytes) reject the whole document with
  :class:`MalformedDocumentError`;
* type inference never fails — a cell that does not look like a number or
  boolean simply stays a string.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re

from rag_ingest.chunking.errors import EmptyDocumentError, MalformedDocumentError
from rag_ingest.chunking.models import (
    BoolValue,
    CellValue,
    NullValue,
    NumberValue,
    ParsedTable,
    Record,
    StringValue,
)

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$", re.ASCII)
_INT_RE = re.compile(r"^\s*-?\d+\s*$", re.ASCII)
_TRUE = {"true", "TRUE", "True"}
_FALSE = {"false", "FALSE", "False"}


def infer_value(raw: str) -> CellValue:
    """Opportunistically type a single cell.

    >>> infer_value("42").value
    42
    >>> infer_value("TRUE").value
    True
    >>> infer_value("n/a").value
    'n/a'
    """
    if raw == "":
        return NullValue()
    if raw in _TRUE:
        return BoolValue(value=True)
    if raw in _FALSE:
        return BoolValue(value=False)
    if _NUMBER_RE.match(raw):
        if _INT_RE.match(raw):
            return NumberValue(value=int(raw))
        number = float(raw)
        if math.isfinite(number):
            return NumberValue(value=number)
    return StringValue(value=raw)


def decode_text(data: str | bytes) -> str:
    """Decode UTF-8 bytes; a leading BOM is dropped from bytes and text alike."""
    if isinstance(data, str):
        return data.removeprefix("\ufeff")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(f"Document is not valid UTF-8: {exc}") from exc


def _dedupe_headers(raw_headers: list[str]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for name in raw_headers:
        name = name.strip()
        if name in seen:
            seen[name] += 1
            renamed = f"{name}_{seen[name]}"
            while renamed in seen:
                seen[name] += 1
                renamed = f"{name}_{seen[name]}"
            logger.warning("Duplicate header %r renamed to %r", name, renamed)
            seen[renamed] = 0
            name = renamed
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def parse_table(data: str | bytes, *, delimiter: str = ",") -> ParsedTable:
    """Parse delimited text into a :class:`ParsedTable`.

    Parameters
    ----------
    data:
        Raw document, either decoded text or UTF-8 bytes (a BOM is tolerated).
    delimiter:
        Field separator, ``","`` for CSV or ``"\\t"`` for TSV.

    Returns
    -------
    ParsedTable
        Trimmed headers and one record per non-blank data line.

    Raises
    ------
    MalformedDocumentError
        When the decoder or the CSV reader reports any structural error.
    EmptyDocumentError
        When no data rows remain after parsing.
    """
    text = decode_text(data)
    if len(text) > csv.field_size_limit():
        csv.field_size_limit(len(text))
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    rows: list[tuple[int, list[str]]] = []
    try:
        for row in reader:
            if not row:  # blank line
                continue
            rows.append((reader.line_num, row))
    except csv.Error as exc:
        raise MalformedDocumentError(
            f"Failed to parse delimited document: {exc}",
            errors=[f"line {reader.line_num}: {exc}"],
        ) from exc

    if not rows:
        raise EmptyDocumentError("Document has no header row")

    _, raw_headers = rows[0]
    headers = _dedupe_headers(raw_headers)

    errors: list[str] = []
    records: list[Record] = []
    for line_num, row in rows[1:]:
        if len(row) != len(headers):
            errors.append(f"line {line_num}: expected {len(headers)} fields, got {len(row)}")
            continue
        records.append({name: infer_value(cell) for name, cell in zip(headers, row)})

    if errors:
        raise MalformedDocumentError(
            f"Failed to parse delimited document: {len(errors)} malformed row(s)",
            errors=errors,
        )
    if not records:
        raise EmptyDocumentError("Document has a header row but no data rows")

    logger.debug("Parsed %d rows x %d columns", len(records), len(headers))
    return ParsedTable(headers=tuple(headers), records=tuple(records))
