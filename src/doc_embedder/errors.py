"""Typed failures raised by the chunking and embedding pipeline.

Every error carries a stable :attr:`kind` so that callers (the HTTP
layer, the CLI, the controller's ``last_error``) can report it without
matching on class names.
"""

from __future__ import annotations

from typing import Any


class DocEmbedderError(Exception):
    """Base class for all pipeline errors."""

    kind = "DocEmbedderError"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable error descriptor."""
        return {"kind": self.kind, "message": str(self)}


class InvalidConfigurationError(DocEmbedderError, ValueError):
    """A pipeline parameter (e.g. chunk size) is out of range."""

    kind = "InvalidConfiguration"


class EmptyDocumentError(DocEmbedderError):
    """The submitted document produced no chunks."""

    kind = "EmptyDocument"


class EmbeddingFailedError(DocEmbedderError):
    """The embedding model raised while processing a specific chunk."""

    kind = "EmbeddingFailed"

    def __init__(self, chunk_id: int, cause: BaseException) -> None:
        super().__init__(f"Embedding failed for chunk {chunk_id}: {cause}")
        self.chunk_id = chunk_id
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "chunk_id": self.chunk_id}


class InconsistentEmbeddingDimensionError(DocEmbedderError):
    """The model returned vectors of different lengths within one run."""

    kind = "InconsistentEmbeddingDimension"

    def __init__(self, chunk_id: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Chunk {chunk_id} embedding has dimension {actual}, expected {expected}"
        )
        self.chunk_id = chunk_id
        self.expected = expected
        self.actual = actual

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "chunk_id": self.chunk_id,
            "expected": self.expected,
            "actual": self.actual,
        }


class EmptyResultSetError(DocEmbedderError):
    """Export was attempted without any embedded chunks."""

    kind = "EmptyResultSet"


class OperationInProgressError(DocEmbedderError):
    """Another pipeline operation is still running on the same state."""

    kind = "OperationInProgress"


class InvalidStateError(DocEmbedderError):
    """The requested operation is not valid in the current pipeline phase."""

    kind = "InvalidState"


class EmbeddingCancelledError(DocEmbedderError):
    """The embedding run was interrupted between two chunks."""

    kind = "EmbeddingCancelled"


class ModelLoadError(DocEmbedderError):
    """The embedding model could not be loaded."""

    kind = "ModelLoad"
