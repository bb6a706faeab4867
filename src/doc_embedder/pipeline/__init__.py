"""
Pipeline — the controller state machine that drives chunking,
embedding, and export for one document at a time.
"""

from doc_embedder.pipeline.controller import PipelineController
from doc_embedder.pipeline.state import Phase, PipelineState

__all__ = ["Phase", "PipelineController", "PipelineState"]
