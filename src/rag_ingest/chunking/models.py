"""Domain models for parsed tables and produced chunks.

Cell values are a tagged union (:data:`CellValue`) rather than ``Any`` so
that the renderer can tell a missing value from an empty string, a zero or
``false``.  Chunks and their metadata are frozen: once a chunker returns a
ChunkSet nothing downstream can mutate it.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from langchain_core.documents import Document


# ── Cell values ─────────────────────────────────────────────────────────


class StringValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str

    def render(self) -> str:
        return self.value


class NumberValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: Union[int, float]

    def render(self) -> str:
        """Render like a spreadsheet would: ``3.0`` → ``"3"``, ``2.5`` → ``"2.5"``."""
        value = self.value
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)


class BoolValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"
    value: bool

    def render(self) -> str:
        return "true" if self.value else "false"


class NullValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["null"] = "null"

    def render(self) -> str:
        return ""


CellValue = Annotated[
    Union[StringValue, NumberValue, BoolValue, NullValue],
    Field(discriminator="kind"),
]

# Column name → value, in header order.
Record = dict[str, CellValue]


def is_blank(value: CellValue | None) -> bool:
    """Return ``True`` for values omitted from rendered rows (absent, null, ``""``)."""
    if value is None or isinstance(value, NullValue):
        return True
    return isinstance(value, StringValue) and value.value == ""


# ── Parsed table ────────────────────────────────────────────────────────


class ParsedTable(BaseModel):
    """Output of the tabular parser: ordered headers plus ordered records."""

    model_config = ConfigDict(frozen=True)

    headers: tuple[str, ...]
    records: tuple[Record, ...]

    @property
    def row_count(self) -> int:
        return len(self.records)


# ── Strategy ────────────────────────────────────────────────────────────


class ChunkStrategy(str, Enum):
    """Partitioning strategy for tabular documents."""

    ROW = "row"
    COLUMN = "column"
    HYBRID = "hybrid"


# ── Chunks ──────────────────────────────────────────────────────────────


class ChunkMetadata(BaseModel):
    """Positional metadata attached to every chunk.

    Attributes
    ----------
    chunk_index:
        Zero-based position of the chunk in its ChunkSet.
    total_chunks:
        Size of the ChunkSet the chunk belongs to.
    row_start, row_end:
        Inclusive zero-based row range covered by the chunk.
    column_count:
        Number of columns rendered in the chunk.
    headers:
        The rendered columns, in document order.
    """

    model_config = ConfigDict(frozen=True)

    chunk_index: int = Field(ge=0)
    total_chunks: int = Field(ge=1)
    row_start: int = Field(ge=0)
    row_end: int = Field(ge=0)
    column_count: int = Field(ge=1)
    headers: tuple[str, ...]

    @model_validator(mode="after")
    def _check_ranges(self) -> ChunkMetadata:
        if self.row_end < self.row_start:
            raise ValueError(f"row_end ({self.row_end}) < row_start ({self.row_start})")
        if self.chunk_index >= self.total_chunks:
            raise ValueError(
                f"chunk_index ({self.chunk_index}) must be < total_chunks ({self.total_chunks})"
            )
        return self

    def flat(self) -> dict[str, int | str]:
        """Return a flat dict suitable for vector-store metadata filters."""
        data = self.model_dump()
        data["headers"] = ", ".join(self.headers)
        return data


class Chunk(BaseModel):
    """A self-contained rendered text block plus its metadata."""

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: ChunkMetadata

    def with_total(self, total_chunks: int) -> Chunk:
        """Return a copy whose metadata carries *total_chunks*."""
        meta = ChunkMetadata(**{**self.metadata.model_dump(), "total_chunks": total_chunks})
        return Chunk(content=self.content, metadata=meta)

    def to_document(self, *, source: str = "", doc_id: str = "") -> Document:
        """Convert to a LangChain ``Document`` ready for an embedding step."""
        from langchain_core.documents import Document

        metadata: dict[str, int | str] = {
            **self.metadata.flat(),
            "chunk_id": f"{doc_id}_{self.metadata.chunk_index}",
            "doc_id": doc_id,
            "source": source,
            "char_count": len(self.content),
            "token_estimate": len(self.content) // 4,  # rough ≈4 chars/token
        }
        return Document(page_content=self.content, metadata=metadata)


# Ordered output of one chunking call.
ChunkSet = list[Chunk]
