"""Abstract base class for embedding-model backends.

Adding a new backend (OpenAI, a remote inference server, …) only
requires subclassing :class:`EmbeddingModel` and implementing
:meth:`~EmbeddingModel.load` and :meth:`~EmbeddingModel.embed`.  The
driver and controller are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class EmbeddingModel(ABC):
    """Backend-agnostic embedding model.

    Implementations are expected to return **pooled, L2-normalised**
    vectors of a fixed, model-defined length.  A single instance is
    reused across chunks and runs; :meth:`load` must therefore be
    idempotent.

    Parameters
    ----------
    model_name:
        Identifier of the underlying model, reported in logs and status.
    """

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def load(self) -> None:
        """Load weights / open sessions.  Subsequent calls are no-ops."""
        ...

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*.

        Called at most once at a time; never concurrently.
        """
        ...

    # -- optional overrides ---------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        """``True`` once :meth:`load` has completed."""
        return True

    @property
    def dimension(self) -> int | None:
        """Vector length, or ``None`` when unknown before loading."""
        return None
