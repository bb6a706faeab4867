"""KFP v2 pipeline — embed one document and publish the export artifact.

    import → embed_document

The document is imported from a URI (GCS, S3, or a path mounted in the
cluster) and handed to the ``embed_document`` component, which chunks
it, embeds every chunk sequentially, and emits the JSON export.

Compile
-------
    python -m pipelines.embedding_pipeline --compile
"""

from kfp import compiler, dsl

from pipelines.components.embed_document import embed_document


# ──────────────────────────────────────────────────────────────────────
# Pipeline definition
# ──────────────────────────────────────────────────────────────────────


@dsl.pipeline(
    name="document-embedding-pipeline",
    description=(
        "Chunk a single document into word windows and generate one "
        "sentence embedding per chunk."
    ),
)
def embedding_pipeline(
    document_uri: str = "gs://documents/report.txt",
    source_name: str = "report.txt",
    mime_type: str = "text/plain",
    # ── Chunking ───────────────────────────────────────────────────
    max_words_per_chunk: int = 500,
    # ── Embedding ──────────────────────────────────────────────────
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2",
    progress_checkpoint: float = 20.0,
) -> None:
    """Import the document, then chunk + embed it.

    Parameters
    ----------
    document_uri:
        Location of the source document.
    source_name:
        Name used for the export file (``embeddings_<name>.json``).
    mime_type:
        ``"text/plain"`` or ``"application/pdf"``.
    max_words_per_chunk:
        Word-window size.
    embedding_model:
        HuggingFace model identifier for embedding.
    progress_checkpoint:
        Progress value reported once the model is loaded.
    """
    importer_task = dsl.importer(
        artifact_uri=document_uri,
        artifact_class=dsl.Dataset,
        reimport=False,
    )

    embed_document(
        document=importer_task.output,
        source_name=source_name,
        mime_type=mime_type,
        max_words_per_chunk=max_words_per_chunk,
        embedding_model=embedding_model,
        progress_checkpoint=progress_checkpoint,
    )


# ──────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Document embedding pipeline")
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Compile pipeline to YAML",
    )
    parser.add_argument(
        "--output",
        default="pipelines/compiled/embedding_pipeline.yaml",
        help="Output path for compiled YAML",
    )
    args = parser.parse_args()

    if args.compile:
        compiler.Compiler().compile(embedding_pipeline, args.output)
        print(f"Pipeline compiled → {args.output}")
