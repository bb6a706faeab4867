"""
doc_embedder — chunk a document and generate sentence embeddings for it.

Public API
----------
- :func:`chunk_text` — split text into word windows.
- :func:`embed_all` / :class:`EmbeddingDriver` — sequential embedding with progress.
- :func:`assemble` — build the exportable artifact.
- :class:`PipelineController` — the end-to-end state machine.
"""

from doc_embedder.embedding.base import EmbeddingModel
from doc_embedder.embedding.driver import EmbeddingDriver, embed_all
from doc_embedder.export.assembler import assemble, write_export
from doc_embedder.ingestion.chunker import chunk_text
from doc_embedder.models import Chunk, EmbeddedChunk, ExportableDocument, ExportItem
from doc_embedder.pipeline.controller import PipelineController
from doc_embedder.pipeline.state import Phase, PipelineState

__all__ = [
    "Chunk",
    "EmbeddedChunk",
    "EmbeddingDriver",
    "EmbeddingModel",
    "ExportItem",
    "ExportableDocument",
    "Phase",
    "PipelineController",
    "PipelineState",
    "assemble",
    "chunk_text",
    "embed_all",
    "write_export",
]
