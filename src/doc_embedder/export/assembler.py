"""Result assembly and export of embedded chunks."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from doc_embedder.errors import EmptyResultSetError
from doc_embedder.models import EmbeddedChunk, ExportableDocument, ExportItem

logger = logging.getLogger(__name__)


def assemble(results: Sequence[EmbeddedChunk], source_name: str = "document") -> ExportableDocument:
    """Pair each chunk with its embedding, preserving order.

    Raises
    ------
    EmptyResultSetError
        If *results* is empty; an export needs at least one embedded chunk.
    """
    if not results:
        raise EmptyResultSetError("Nothing to export: no embedded chunks")

    items = [ExportItem(id=r.id, text=r.text, embedding=list(r.embedding)) for r in results]
    return ExportableDocument(
        items=items,
        dimension=len(results[0].embedding),
        source_name=source_name,
    )


def write_export(document: ExportableDocument, directory: str | Path = ".") -> Path:
    """Write *document* as ``embeddings_<source_name>.json`` under *directory*."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / document.filename
    out_path.write_text(document.to_json() + "\n", encoding="utf-8")
    logger.info("Wrote %d embeddings (dim=%d) to %s",
                len(document.items), document.dimension, out_path)
    return out_path
