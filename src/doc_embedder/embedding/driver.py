"""Sequential embedding driver with progress reporting.

Chunks are embedded strictly one at a time, in document order, so the
model never has more than one outstanding call.  Progress is reported
to an observer callback:

* once the model is ready, with the *checkpoint* value (20.0 by default);
* after each chunk, linearly from the checkpoint up to exactly 100.0.

Usage::

    from doc_embedder.embedding.driver import EmbeddingDriver

    driver  = EmbeddingDriver(model)
    results = driver.run(chunks, on_progress=lambda p: print(f"{p:.0f}%"))
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence

from doc_embedder.config import settings
from doc_embedder.embedding.base import EmbeddingModel
from doc_embedder.errors import (
    EmbeddingCancelledError,
    EmbeddingFailedError,
    InconsistentEmbeddingDimensionError,
    InvalidConfigurationError,
    ModelLoadError,
)
from doc_embedder.models import Chunk, EmbeddedChunk

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
EmbedFn = Callable[[str], Sequence[float]]

DEFAULT_CHECKPOINT = 20.0


def _validate_checkpoint(checkpoint: float) -> None:
    if not 0.0 <= checkpoint < 100.0:
        raise InvalidConfigurationError(
            f"progress checkpoint must be in [0, 100), got {checkpoint}"
        )


def progress_after(processed: int, total: int, checkpoint: float = DEFAULT_CHECKPOINT) -> float:
    """Progress value after *processed* of *total* chunks have been embedded."""
    if processed >= total:
        return 100.0
    return checkpoint + (100.0 - checkpoint) * (processed / total)


def embed_all(
    chunks: Sequence[Chunk],
    embed: EmbedFn,
    on_progress: ProgressCallback | None = None,
    *,
    checkpoint: float = DEFAULT_CHECKPOINT,
    cancel_event: threading.Event | None = None,
) -> list[EmbeddedChunk]:
    """Embed every chunk in order and return the embedded chunks.

    Parameters
    ----------
    chunks:
        Chunks in document order.
    embed:
        Callable returning the pooled, normalised vector for a text.
    on_progress:
        Observer receiving progress values in ``[0, 100]``.
    checkpoint:
        Value reported before the first chunk.
    cancel_event:
        Checked between chunks; when set the run stops with
        :class:`EmbeddingCancelledError`.  An in-flight call is never
        interrupted.

    Raises
    ------
    EmbeddingFailedError
        If *embed* raises; carries the failing chunk id.
    InconsistentEmbeddingDimensionError
        If a vector's length differs from the first vector's.
    """
    _validate_checkpoint(checkpoint)
    if not chunks:
        return []

    notify = on_progress or (lambda _value: None)
    total = len(chunks)
    results: list[EmbeddedChunk] = []
    dimension: int | None = None

    notify(checkpoint)
    for processed, chunk in enumerate(chunks, 1):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Embedding cancelled before chunk %d/%d", chunk.id, total)
            raise EmbeddingCancelledError(
                f"Embedding cancelled after {processed - 1} of {total} chunks"
            )

        logger.debug("Processing chunk %d/%d", processed, total)
        try:
            vector = [float(x) for x in embed(chunk.text)]
        except Exception as exc:
            logger.error("Embedding failed for chunk %d: %s", chunk.id, exc)
            raise EmbeddingFailedError(chunk.id, exc) from exc

        if dimension is None:
            dimension = len(vector)
        elif len(vector) != dimension:
            logger.error("Chunk %d returned dimension %d, expected %d",
                         chunk.id, len(vector), dimension)
            raise InconsistentEmbeddingDimensionError(chunk.id, dimension, len(vector))

        results.append(EmbeddedChunk.from_chunk(chunk, vector))
        notify(progress_after(processed, total, checkpoint))

    return results


class EmbeddingDriver:
    """Owns an :class:`EmbeddingModel` for the duration of each run.

    The model is loaded (once; later runs reuse it) before the
    checkpoint is reported, so the checkpoint marks the boundary between
    model-loading time and per-chunk time.

    Parameters
    ----------
    model:
        Embedding backend.  Injected so tests can substitute a fake.
    checkpoint:
        Progress value reported once the model is ready.
    """

    def __init__(
        self,
        model: EmbeddingModel,
        *,
        checkpoint: float = settings.progress_checkpoint,
    ) -> None:
        _validate_checkpoint(checkpoint)
        self.model = model
        self.checkpoint = checkpoint

    def run(
        self,
        chunks: Sequence[Chunk],
        on_progress: ProgressCallback | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> list[EmbeddedChunk]:
        """Load the model if needed, then :func:`embed_all` over *chunks*."""
        if not chunks:
            return []

        t0 = time.monotonic()
        try:
            self.model.load()
        except Exception as exc:
            logger.error("Failed to load embedding model %s: %s", self.model.model_name, exc)
            raise ModelLoadError(f"Could not load {self.model.model_name}: {exc}") from exc
        logger.info("Model %s ready in %.1fs", self.model.model_name, time.monotonic() - t0)

        t1 = time.monotonic()
        results = embed_all(
            chunks,
            self.model.embed,
            on_progress,
            checkpoint=self.checkpoint,
            cancel_event=cancel_event,
        )
        elapsed = time.monotonic() - t1
        logger.info("Embedded %d chunks (dim=%d) in %.1fs",
                    len(results), len(results[0].embedding), elapsed)
        return results
