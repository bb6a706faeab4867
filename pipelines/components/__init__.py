"""KFP v2 components — each file exports one @dsl.component."""

from pipelines.components.embed_document import embed_document

__all__ = ["embed_document"]
