"""Exceptions raised by the chunking engine.

All errors derive from :class:`ChunkingError` so the ingestion layer can
translate any engine failure with a single ``except`` clause.  A failed
document produces no chunks; nothing here is retried.
"""

from __future__ import annotations


class ChunkingError(Exception):
    """Base class for every chunking-engine failure."""


class EmptyDocumentError(ChunkingError):
    """The document has a header but no data rows."""


class MalformedDocumentError(ChunkingError):
    """The document could not be parsed structurally.

    Parameters
    ----------
    message:
        Human-readable summary.
    errors:
        One entry per structural problem, e.g. ``"row 4: expected 3 fields, got 5"``.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors: list[str] = list(errors or [])


class InvalidConfigurationError(ChunkingError, ValueError):
    """Chunking options are out of range (non-positive sizes, overlap too large)."""


class UnsupportedDocumentError(ChunkingError):
    """No loader is registered for the document's file type."""
