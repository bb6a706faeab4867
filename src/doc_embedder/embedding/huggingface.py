"""Sentence-transformer embedding backend via LangChain's HuggingFace integration."""

from __future__ import annotations

import logging
import threading

from langchain_huggingface import HuggingFaceEmbeddings

from doc_embedder.config import settings
from doc_embedder.embedding.base import EmbeddingModel

logger = logging.getLogger(__name__)


class HuggingFaceEmbeddingModel(EmbeddingModel):
    """Lazily loaded sentence-transformer model.

    The underlying ``HuggingFaceEmbeddings`` object is only created on
    :meth:`load`, so constructing this class is cheap and does not touch
    the network or the model cache.

    Parameters
    ----------
    model_name:
        HuggingFace model identifier.
    device:
        Torch device, e.g. ``"cpu"`` or ``"cuda"``.
    normalize_embeddings:
        Whether vectors are L2-normalised (mean pooling is the
        sentence-transformers default for MiniLM models).
    """

    def __init__(
        self,
        model_name: str = settings.embedding_model,
        *,
        device: str = settings.embedding_device,
        normalize_embeddings: bool = True,
    ) -> None:
        super().__init__(model_name)
        self.device = device
        self.normalize_embeddings = normalize_embeddings
        self._embedder: HuggingFaceEmbeddings | None = None
        self._dimension: int | None = None
        self._lock = threading.Lock()

    # -- EmbeddingModel overrides ---------------------------------------------

    def load(self) -> None:
        with self._lock:
            if self._embedder is not None:
                return
            logger.info("Loading embedding model %s on %s", self.model_name, self.device)
            self._embedder = HuggingFaceEmbeddings(
                model_name=self.model_name,
                model_kwargs={"device": self.device},
                encode_kwargs={"normalize_embeddings": self.normalize_embeddings},
            )

    def embed(self, text: str) -> list[float]:
        if self._embedder is None:
            self.load()
        # embed_documents applies encode_kwargs (normalisation); embed_query may not.
        vector = self._embedder.embed_documents([text])[0]  # type: ignore[union-attr]
        if self._dimension is None:
            self._dimension = len(vector)
        return [float(x) for x in vector]

    @property
    def is_loaded(self) -> bool:
        return self._embedder is not None

    @property
    def dimension(self) -> int | None:
        return self._dimension
