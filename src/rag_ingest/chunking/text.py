"""Free-text normalisation and sentence-based chunking."""

from __future__ import annotations

import logging
import re

from rag_ingest.chunking.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

# A run of non-terminal characters with its terminal punctuation (leading
# terminators only at the start of the text), or bare punctuation.
_SENTENCE_RE = re.compile(r"[.!?]*[^.!?]+[.!?]*|[.!?]+")

# Rough characters-per-word used to turn a character overlap into words.
CHARS_PER_WORD = 5


def normalize_text(text: str) -> str:
    """Unify line endings to ``\\n`` and strip surrounding whitespace."""
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def split_sentences(text: str) -> list[str]:
    """Split normalised *text* on ``.``, ``!`` and ``?``.

    Text without any sentence body (e.g. only punctuation) is returned as a
    single unit.
    """
    sentences = [s.strip() for s in _SENTENCE_RE.findall(text)]
    sentences = [s for s in sentences if s]
    return sentences or [text]


def chunk_text(text: str, chunk_size: int = 800, overlap: int = 200) -> list[str]:
    """Group sentences into chunks of roughly *chunk_size* characters.

    Parameters
    ----------
    text:
        Raw text; line endings are normalised first.
    chunk_size:
        Character budget.  A chunk is closed when the next sentence would
        push it past the budget; a single sentence longer than the budget
        still becomes its own chunk.
    overlap:
        Approximate character overlap, carried as the last
        ``overlap // 5`` words of the closed chunk.

    Returns
    -------
    list[str]
        Chunks in document order; empty for blank input.
    """
    if chunk_size <= 0:
        raise InvalidConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise InvalidConfigurationError(f"overlap must be >= 0, got {overlap}")

    cleaned = normalize_text(text)
    if not cleaned:
        return []

    overlap_words = overlap // CHARS_PER_WORD
    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(cleaned):
        if current and len(current) + len(sentence) > chunk_size:
            chunks.append(current.strip())
            tail = current.split(" ")[-overlap_words:] if overlap_words else []
            current = " ".join(tail + [sentence])
        else:
            current = f"{current} {sentence}" if current else sentence

    if current.strip():
        chunks.append(current.strip())

    logger.debug("Text chunking: %d chars -> %d chunks", len(cleaned), len(chunks))
    return chunks
