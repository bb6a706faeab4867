"""Export — assemble embedded chunks into the downloadable JSON artifact."""

from doc_embedder.export.assembler import assemble, write_export

__all__ = ["assemble", "write_export"]
