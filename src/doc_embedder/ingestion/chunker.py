"""Word-window text chunking."""

from __future__ import annotations

import logging

from doc_embedder.errors import InvalidConfigurationError
from doc_embedder.models import Chunk

logger = logging.getLogger(__name__)


def chunk_text(text: str, max_words_per_chunk: int = 500) -> list[Chunk]:
    """Split *text* into consecutive windows of at most *max_words_per_chunk* words.

    Parameters
    ----------
    text:
        Raw document text.  Any run of whitespace separates two words;
        words are never split across chunks.
    max_words_per_chunk:
        Upper bound on the number of words in a chunk.  Must be positive.

    Returns
    -------
    list[Chunk]
        Non-overlapping chunks in document order with ids ``1..k``.
        Windows that are blank after trimming are dropped and do not
        consume an id.

    Raises
    ------
    InvalidConfigurationError
        If *max_words_per_chunk* is not a positive integer.
    """
    if isinstance(max_words_per_chunk, bool) or not isinstance(max_words_per_chunk, int):
        raise InvalidConfigurationError(
            f"max_words_per_chunk must be an integer, got {max_words_per_chunk!r}"
        )
    if max_words_per_chunk <= 0:
        raise InvalidConfigurationError(
            f"max_words_per_chunk must be > 0, got {max_words_per_chunk}"
        )

    words = text.split()
    chunks: list[Chunk] = []
    for start in range(0, len(words), max_words_per_chunk):
        window = " ".join(words[start : start + max_words_per_chunk]).strip()
        if not window:
            continue
        chunks.append(Chunk(id=len(chunks) + 1, text=window))

    logger.debug("Split %d words into %d chunks (max %d words each)",
                 len(words), len(chunks), max_words_per_chunk)
    return chunks
