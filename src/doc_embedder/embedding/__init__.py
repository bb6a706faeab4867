"""
Embedding — model abstraction and the sequential embedding driver.

Public surface
--------------
- :class:`EmbeddingModel` — abstract backend (subclass for other providers).
- :class:`HuggingFaceEmbeddingModel` — default sentence-transformer backend.
- :class:`EmbeddingDriver` — loads a model and embeds chunks in order.
- :func:`embed_all` — the driver loop over a plain ``embed`` callable.
"""

from doc_embedder.embedding.base import EmbeddingModel
from doc_embedder.embedding.driver import EmbeddingDriver, embed_all, progress_after

__all__ = [
    "EmbeddingDriver",
    "EmbeddingModel",
    "HuggingFaceEmbeddingModel",
    "embed_all",
    "progress_after",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import HuggingFaceEmbeddingModel to avoid pulling in torch at import time."""
    if name == "HuggingFaceEmbeddingModel":
        from doc_embedder.embedding.huggingface import HuggingFaceEmbeddingModel

        return HuggingFaceEmbeddingModel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
