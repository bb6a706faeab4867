"""Domain models for chunks, embedded chunks, and the export artifact."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Chunk(BaseModel):
    """A bounded window of words cut from the source document.

    Attributes
    ----------
    id:
        1-based position of the chunk in document order.  Ids are
        contiguous: a document with *k* chunks has ids ``1..k``.
    text:
        The chunk's words joined by single spaces, never blank.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    text: str

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("chunk text must not be blank")
        return value

    def preview(self, length: int = 200) -> str:
        """Return the first *length* characters, with an ellipsis when cut."""
        if len(self.text) <= length:
            return self.text
        return self.text[:length] + "..."


class EmbeddedChunk(Chunk):
    """A :class:`Chunk` together with its pooled, normalised embedding."""

    embedding: list[float]

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: list[float]) -> EmbeddedChunk:
        return cls(id=chunk.id, text=chunk.text, embedding=embedding)


class ExportItem(BaseModel):
    """One record of the export artifact.  Field order is the JSON key order."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    embedding: list[float]


class ExportableDocument(BaseModel):
    """Assembled embeddings for a single source document.

    Attributes
    ----------
    items:
        One :class:`ExportItem` per chunk, in chunk order.
    dimension:
        Length of every embedding vector in *items*.
    source_name:
        Name of the document the chunks were cut from.
    """

    model_config = ConfigDict(frozen=True)

    items: list[ExportItem]
    dimension: int
    source_name: str

    @property
    def filename(self) -> str:
        """Conventional file name of the export artifact."""
        return f"embeddings_{self.source_name}.json"

    def to_payload(self) -> dict[str, list[dict]]:
        """Return the artifact body: ``{"items": [{id, text, embedding}, ...]}``."""
        return {"items": [item.model_dump() for item in self.items]}

    def to_json(self) -> str:
        """Render the artifact as pretty-printed JSON with a stable key order."""
        return json.dumps(self.to_payload(), indent=2, ensure_ascii=False)
