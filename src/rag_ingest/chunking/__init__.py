"""
Chunking — split tabular and free-text documents into embeddable chunks.

Pure, synchronous functions with no I/O: every call builds a fresh,
immutable ChunkSet that the caller forwards to an indexing step.

Public surface
--------------
- :func:`parse_table` — delimited text to headers + typed records.
- :func:`chunk_rows`, :func:`chunk_columns`, :func:`chunk_hybrid` — tabular strategies.
- :func:`chunk_table` — parse and dispatch to one strategy.
- :func:`chunk_text` — sentence-based chunking of free text.
- :class:`Chunk`, :class:`ChunkMetadata`, :class:`ChunkStrategy` — data models.
"""

from rag_ingest.chunking.errors import (
    ChunkingError,
    EmptyDocumentError,
    InvalidConfigurationError,
    MalformedDocumentError,
    UnsupportedDocumentError,
)
from rag_ingest.chunking.models import (
    BoolValue,
    Chunk,
    ChunkMetadata,
    ChunkSet,
    ChunkStrategy,
    NullValue,
    NumberValue,
    ParsedTable,
    StringValue,
)
from rag_ingest.chunking.parser import parse_table
from rag_ingest.chunking.tabular import chunk_columns, chunk_hybrid, chunk_rows, chunk_table
from rag_ingest.chunking.text import chunk_text, normalize_text, split_sentences

__all__ = [
    "BoolValue",
    "Chunk",
    "ChunkMetadata",
    "ChunkSet",
    "ChunkStrategy",
    "ChunkingError",
    "EmptyDocumentError",
    "InvalidConfigurationError",
    "MalformedDocumentError",
    "NullValue",
    "NumberValue",
    "ParsedTable",
    "StringValue",
    "UnsupportedDocumentError",
    "chunk_columns",
    "chunk_hybrid",
    "chunk_rows",
    "chunk_table",
    "chunk_text",
    "normalize_text",
    "split_sentences",
]
