"""Document decoders — raw bytes to text."""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from rag_ingest.chunking.errors import MalformedDocumentError
from rag_ingest.chunking.parser import decode_text

__all__ = ["decode_text", "extract_pdf_text"]

logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """Extract the text layer of a PDF, pages separated by blank lines.

    Raises
    ------
    MalformedDocumentError
        When the PDF cannot be read.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages: list[str] = []
        for number, page in enumerate(reader.pages, 1):
            text = page.extract_text() or ""
            if not text.strip():
                logger.warning("PDF page %d has no extractable text", number)
                continue
            pages.append(text)
    except PyPdfError as exc:
        raise MalformedDocumentError(f"Failed to extract text from PDF: {exc}") from exc
    return "\n\n".join(pages)
