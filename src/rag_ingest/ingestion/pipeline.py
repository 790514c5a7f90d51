"""Ingestion entry points — choose a chunking strategy per document type.

Usage::

    from rag_ingest.ingestion import ingest_file

    docs = ingest_file("sales.csv", strategy="hybrid")
    vectorstore.add_documents(docs)
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rag_ingest.chunking.errors import InvalidConfigurationError, UnsupportedDocumentError
from rag_ingest.chunking.models import ChunkStrategy
from rag_ingest.chunking.tabular import chunk_table
from rag_ingest.chunking.text import chunk_text
from rag_ingest.config import settings
from rag_ingest.ingestion.loader import decode_text, extract_pdf_text

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)

TABULAR_DELIMITERS = {".csv": ",", ".tsv": "\t"}
TEXT_SUFFIXES = {".txt", ".md", ".markdown"}
PDF_SUFFIXES = {".pdf"}
SUPPORTED_SUFFIXES = set(TABULAR_DELIMITERS) | TEXT_SUFFIXES | PDF_SUFFIXES


def document_id(data: str | bytes) -> str:
    """Stable content hash used as the parent id of every chunk."""
    raw = data.encode("utf-8") if isinstance(data, str) else data
    return hashlib.sha256(raw).hexdigest()[:16]


def _tabular_defaults(strategy: ChunkStrategy) -> dict[str, Any]:
    if strategy is ChunkStrategy.ROW:
        return {
            "rows_per_chunk": settings.csv_rows_per_chunk,
            "overlap_rows": settings.csv_overlap_rows,
            "include_headers": settings.csv_include_headers,
        }
    if strategy is ChunkStrategy.COLUMN:
        return {"columns_per_chunk": settings.csv_columns_per_chunk}
    return {
        "rows_per_chunk": settings.hybrid_rows_per_chunk,
        "columns_per_chunk": settings.hybrid_columns_per_chunk,
    }


TEXT_OPTIONS = {"chunk_size", "overlap"}


def _check_text_options(options: dict[str, Any]) -> None:
    unknown = sorted(set(options) - TEXT_OPTIONS)
    if unknown:
        raise InvalidConfigurationError(
            f"Invalid options for free-text documents: {', '.join(unknown)}"
        )


def _text_documents(text: str, source: str, doc_id: str, **options: Any) -> list[Document]:
    from langchain_core.documents import Document

    chunks = chunk_text(
        text,
        chunk_size=options.get("chunk_size", settings.text_chunk_size),
        overlap=options.get("overlap", settings.text_chunk_overlap),
    )
    return [
        Document(
            page_content=content,
            metadata={
                "chunk_id": f"{doc_id}_{idx}",
                "doc_id": doc_id,
                "source": source,
                "chunk_index": idx,
                "total_chunks": len(chunks),
                "char_count": len(content),
                "token_estimate": len(content) // 4,
            },
        )
        for idx, content in enumerate(chunks)
    ]


def ingest_document(
    filename: str,
    data: str | bytes,
    *,
    strategy: ChunkStrategy | str | None = None,
    **options: Any,
) -> list[Document]:
    """Chunk one uploaded document and return LangChain ``Document`` objects.

    Parameters
    ----------
    filename:
        Original file name; its extension selects the loader.
    data:
        Raw content.
    strategy:
        Tabular strategy (``row``, ``column``, ``hybrid``).  Defaults to
        ``settings.csv_strategy``; ignored for free-text documents.
    **options:
        Overrides for the chunker options, otherwise taken from settings.

    Raises
    ------
    UnsupportedDocumentError
        For file types without a loader.
    ChunkingError
        Any engine error (empty, malformed, bad options) propagates as-is.
    """
    suffix = Path(filename).suffix.lower()
    doc_id = document_id(data)

    if suffix in TABULAR_DELIMITERS:
        try:
            chosen = ChunkStrategy(strategy or settings.csv_strategy)
        except ValueError as exc:
            raise InvalidConfigurationError(f"Unknown chunking strategy {strategy!r}") from exc
        delimiter = settings.csv_delimiter if suffix == ".csv" else TABULAR_DELIMITERS[suffix]
        merged = {**_tabular_defaults(chosen), **options}
        chunks = chunk_table(data, chosen, delimiter=delimiter, **merged)
        docs = [c.to_document(source=filename, doc_id=doc_id) for c in chunks]
    elif suffix in TEXT_SUFFIXES:
        _check_text_options(options)
        docs = _text_documents(decode_text(data), filename, doc_id, **options)
    elif suffix in PDF_SUFFIXES:
        _check_text_options(options)
        raw = data.encode("utf-8") if isinstance(data, str) else data
        docs = _text_documents(extract_pdf_text(raw), filename, doc_id, **options)
    else:
        raise UnsupportedDocumentError(f"No loader for {filename!r} (suffix {suffix!r})")

    logger.info("Ingested %s: %d chunks", filename, len(docs))
    return docs


def ingest_file(path: str | Path, **kwargs: Any) -> list[Document]:
    """Read *path* from disk and run :func:`ingest_document` on it."""
    path = Path(path)
    return ingest_document(path.name, path.read_bytes(), **kwargs)


def ingest_directory(path: str | Path, glob: str = "**/*", **kwargs: Any) -> list[Document]:
    """Ingest every supported file under *path*, in sorted path order.

    Unsupported files are skipped; engine errors on any file propagate.
    """
    docs: list[Document] = []
    for file in sorted(Path(path).glob(glob)):
        if not file.is_file() or file.suffix.lower() not in SUPPORTED_SUFFIXES:
            continue
        docs.extend(ingest_file(file, **kwargs))
    return docs
