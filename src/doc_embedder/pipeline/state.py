"""Pipeline state — the single source of truth owned by the controller.

Only :class:`~doc_embedder.pipeline.controller.PipelineController` mutates
a :class:`PipelineState`; every other component receives copies of the
data it needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from doc_embedder.errors import DocEmbedderError
from doc_embedder.models import Chunk, EmbeddedChunk


class Phase(str, Enum):
    """Lifecycle of one document run.

    ``IDLE → CHUNKED → EMBEDDING → COMPLETE`` with ``EMBEDDING → FAILED``.
    ``COMPLETE`` and ``FAILED`` are terminal until a new document is
    submitted.
    """

    IDLE = "idle"
    CHUNKED = "chunked"
    EMBEDDING = "embedding"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class PipelineState:
    """Mutable state of the pipeline for the current document.

    Attributes
    ----------
    phase:
        Current :class:`Phase`.
    source_name:
        Name of the submitted document, used for the export file name.
    chunks:
        Chunks of the current document; never empty once chunked.
    results:
        Embedded chunks; populated only when ``phase`` is ``COMPLETE``.
    progress:
        Last reported progress in ``[0, 100]``.
    last_error:
        The failure that moved the pipeline to ``FAILED``, if any.
    """

    phase: Phase = Phase.IDLE
    source_name: str = "document"
    chunks: list[Chunk] = field(default_factory=list)
    results: list[EmbeddedChunk] = field(default_factory=list)
    progress: float = 0.0
    last_error: DocEmbedderError | None = None

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serialisable summary (no vectors, no chunk bodies)."""
        return {
            "phase": self.phase.value,
            "source_name": self.source_name,
            "num_chunks": len(self.chunks),
            "num_results": len(self.results),
            "progress": round(self.progress, 2),
            "dimension": len(self.results[0].embedding) if self.results else None,
            "last_error": self.last_error.to_dict() if self.last_error else None,
        }
