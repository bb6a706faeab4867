"""Pipeline controller — the end-to-end state machine.

The controller mediates between an outer surface (HTTP API, CLI, KFP
component) and the chunker, embedding driver, and assembler.  It is
the only writer of :class:`~doc_embedder.pipeline.state.PipelineState`.

Usage::

    from doc_embedder.pipeline import PipelineController

    controller = PipelineController(model)
    controller.submit_document(text, source_name="report.txt")
    controller.start_embedding(on_progress=print)
    document = controller.export()
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any

from doc_embedder.config import settings
from doc_embedder.embedding.base import EmbeddingModel
from doc_embedder.embedding.driver import EmbeddingDriver, ProgressCallback
from doc_embedder.errors import (
    DocEmbedderError,
    EmbeddingCancelledError,
    EmptyDocumentError,
    InvalidStateError,
    OperationInProgressError,
)
from doc_embedder.export.assembler import assemble
from doc_embedder.ingestion.chunker import chunk_text
from doc_embedder.models import Chunk, EmbeddedChunk, ExportableDocument
from doc_embedder.pipeline.state import Phase, PipelineState

logger = logging.getLogger(__name__)


class PipelineController:
    """Owns the pipeline state for one document at a time.

    Parameters
    ----------
    model:
        Embedding backend.  When *None*, a
        :class:`~doc_embedder.embedding.huggingface.HuggingFaceEmbeddingModel`
        is created from the global settings (loaded lazily on first run).
    max_words_per_chunk:
        Chunk size used by :meth:`submit_document`.
    checkpoint:
        Progress value reported once the model is ready.
    on_progress:
        Default progress observer for every run.
    """

    def __init__(
        self,
        model: EmbeddingModel | None = None,
        *,
        max_words_per_chunk: int = settings.max_words_per_chunk,
        checkpoint: float = settings.progress_checkpoint,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if model is None:
            from doc_embedder.embedding.huggingface import HuggingFaceEmbeddingModel

            model = HuggingFaceEmbeddingModel()
        self._driver = EmbeddingDriver(model, checkpoint=checkpoint)
        self.max_words_per_chunk = max_words_per_chunk
        self._on_progress = on_progress
        self._state = PipelineState()
        self._lock = threading.Lock()
        self._cancel_event: threading.Event | None = None

    # -- read access ----------------------------------------------------------

    @property
    def model(self) -> EmbeddingModel:
        return self._driver.model

    @property
    def state(self) -> PipelineState:
        """A copy of the current state; mutating it has no effect."""
        with self._lock:
            return dataclasses.replace(
                self._state,
                chunks=list(self._state.chunks),
                results=list(self._state.results),
            )

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def snapshot(self) -> dict[str, Any]:
        """State summary plus the embedding model in use."""
        with self._lock:
            return {**self._state.snapshot(), "model_name": self.model.model_name}

    # -- transitions ----------------------------------------------------------

    def submit_document(self, text: str, source_name: str = "document") -> list[Chunk]:
        """Reset the pipeline and chunk *text*.

        Raises
        ------
        OperationInProgressError
            While an embedding run is in flight.
        InvalidConfigurationError
            If the configured chunk size is not positive (state stays ``IDLE``).
        EmptyDocumentError
            If *text* contains no words (state stays ``IDLE``).
        """
        with self._lock:
            if self._state.phase is Phase.EMBEDDING:
                raise OperationInProgressError(
                    "Cannot submit a document while embeddings are being generated"
                )
            self._state = PipelineState(source_name=source_name)
            self._cancel_event = None

            chunks = chunk_text(text, self.max_words_per_chunk)
            if not chunks:
                raise EmptyDocumentError(f"Document {source_name!r} contains no text to chunk")

            self._state.chunks = chunks
            self._state.phase = Phase.CHUNKED

        logger.info("Generated %d chunks from %s", len(chunks), source_name)
        return list(chunks)

    def start_embedding(
        self,
        on_progress: ProgressCallback | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> list[EmbeddedChunk]:
        """Embed the current chunks.

        A call while a run is in flight, or after it completed, is a
        no-op that returns the current results.

        Raises
        ------
        InvalidStateError
            In ``IDLE`` or ``FAILED``; submit a document first.
        EmbeddingFailedError, InconsistentEmbeddingDimensionError, ModelLoadError
            After moving to ``FAILED``; progress keeps its last value.
        EmbeddingCancelledError
            After reverting to ``CHUNKED`` with progress discarded.
        """
        with self._lock:
            phase = self._state.phase
            if phase in (Phase.EMBEDDING, Phase.COMPLETE):
                logger.info("start_embedding ignored: pipeline is %s", phase.value)
                return list(self._state.results)
            if phase is not Phase.CHUNKED:
                raise InvalidStateError(
                    f"Cannot start embedding from phase {phase.value!r}; submit a document first"
                )
            self._state.phase = Phase.EMBEDDING
            self._state.progress = 0.0
            self._state.results = []
            self._state.last_error = None
            self._cancel_event = cancel_event or threading.Event()
            event = self._cancel_event
            chunks = list(self._state.chunks)

        observers = [cb for cb in (self._on_progress, on_progress) if cb is not None]

        def report(value: float) -> None:
            with self._lock:
                self._state.progress = max(self._state.progress, value)
            for callback in observers:
                callback(value)

        logger.info("Embedding %d chunks with %s", len(chunks), self.model.model_name)
        try:
            results = self._driver.run(chunks, report, cancel_event=event)
        except EmbeddingCancelledError:
            with self._lock:
                self._state.phase = Phase.CHUNKED
                self._state.progress = 0.0
                self._state.results = []
                self._cancel_event = None
            logger.info("Embedding cancelled; pipeline reverted to chunked")
            raise
        except Exception as exc:
            with self._lock:
                self._state.phase = Phase.FAILED
                self._state.results = []
                self._state.last_error = (
                    exc if isinstance(exc, DocEmbedderError) else DocEmbedderError(str(exc))
                )
                self._cancel_event = None
            logger.error("Embedding run failed: %s", exc)
            raise

        with self._lock:
            self._state.results = results
            self._state.progress = 100.0
            self._state.phase = Phase.COMPLETE
            self._cancel_event = None
        logger.info("All embeddings generated successfully")
        return list(results)

    def cancel(self) -> bool:
        """Ask an in-flight run to stop before its next chunk.

        Returns ``True`` when a run was signalled.
        """
        with self._lock:
            if self._state.phase is not Phase.EMBEDDING or self._cancel_event is None:
                return False
            self._cancel_event.set()
            return True

    def export(self) -> ExportableDocument:
        """Assemble the completed results; does not change state.

        Raises
        ------
        InvalidStateError
            Unless the pipeline is ``COMPLETE``.
        """
        with self._lock:
            if self._state.phase is not Phase.COMPLETE:
                raise InvalidStateError(
                    f"Nothing to export: pipeline is {self._state.phase.value!r}"
                )
            results = list(self._state.results)
            source_name = self._state.source_name
        return assemble(results, source_name)
