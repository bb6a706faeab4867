"""KFP v2 component — Chunk and embed a single document.

Reads one document from an input Dataset, splits it into word windows,
embeds each chunk sequentially, and writes the export artifact.  The
component is self-contained: it only needs the packages listed in
``packages_to_install``.

Structured output contract (a single JSON document)::

    {
      "items": [
        {"id": 1, "text": "<chunk text>", "embedding": [0.012, -0.034, ...]},
        ...
      ]
    }

Local testing
-------------
    from pipelines.components.embed_document import embed_document
    embed_document.python_func(
        document=_FakeArtifact("/tmp/report.txt"),
        embeddings=_FakeArtifact("/tmp/embeddings_report.txt.json"),
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

from kfp import dsl


@dsl.component(
    base_image="python:3.11-slim",
    packages_to_install=[
        "langchain-huggingface>=0.1,<1",
        "sentence-transformers>=3,<4",
        "pypdf>=4",
    ],
)
def embed_document(
    document: dsl.Input[dsl.Dataset],
    embeddings: dsl.Output[dsl.Dataset],
    metrics: dsl.Output[dsl.Metrics],
    source_name: str = "document",
    mime_type: str = "text/plain",
    max_words_per_chunk: int = 500,
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2",
    progress_checkpoint: float = 20.0,
) -> str:
    """Chunk *document*, embed every chunk, and write the JSON export.

    Parameters
    ----------
    document:
        Input Dataset — the raw document bytes.
    embeddings:
        Output Dataset — the export artifact (see module docstring).
    metrics:
        Output Metrics artifact with embedding statistics.
    source_name:
        Name recorded for the document (e.g. the original file name).
    mime_type:
        Content type of *document*; ``application/pdf`` or text.
    max_words_per_chunk:
        Maximum number of words per chunk.
    embedding_model:
        HuggingFace sentence-transformer model identifier.
    progress_checkpoint:
        Progress value reported once the model is loaded.

    Returns
    -------
    str
        Summary, e.g. ``"Embedded 12 chunks (dim=384) in 3.1s"``.
    """
    import io
    import json
    import logging
    import re
    import time
    from pathlib import Path

    from langchain_huggingface import HuggingFaceEmbeddings

    logging.basicConfig(level=logging.INFO)
    log = logging.getLogger("embed_document")

    # ── validate params ───────────────────────────────────────────
    if max_words_per_chunk <= 0:
        raise ValueError(f"max_words_per_chunk must be > 0, got {max_words_per_chunk}")
    if not 0.0 <= progress_checkpoint < 100.0:
        raise ValueError(f"progress_checkpoint must be in [0, 100), got {progress_checkpoint}")

    # ── decode (best effort) ──────────────────────────────────────
    raw = Path(document.path).read_bytes()
    text = None
    if mime_type.split(";", 1)[0].strip().lower() == "application/pdf":
        from pypdf import PdfReader
        from pypdf.errors import PdfReadError

        try:
            reader = PdfReader(io.BytesIO(raw))
            text = "\n".join(page.extract_text() or "" for page in reader.pages)
        except (PdfReadError, ValueError) as exc:
            log.warning("Could not parse PDF (%s); decoding bytes as text", exc)
    if text is None:
        text = raw.decode("utf-8", errors="replace")
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]", " ", text)
    log.info("Read %d bytes (%d chars) from %s", len(raw), len(text), source_name)

    # ── chunk into word windows ───────────────────────────────────
    words = text.split()
    chunks: list[dict] = []
    for start in range(0, len(words), max_words_per_chunk):
        window = " ".join(words[start : start + max_words_per_chunk]).strip()
        if window:
            chunks.append({"id": len(chunks) + 1, "text": window})

    if not chunks:
        raise ValueError(f"Document {source_name!r} contains no text to chunk")
    log.info("Generated %d chunks from %s", len(chunks), source_name)

    # ── embed sequentially ────────────────────────────────────────
    embedder = HuggingFaceEmbeddings(
        model_name=embedding_model,
        encode_kwargs={"normalize_embeddings": True},
    )
    log.info("  %.0f%% complete (model ready)", progress_checkpoint)

    items: list[dict] = []
    dim = None
    t0 = time.monotonic()
    for processed, chunk in enumerate(chunks, 1):
        try:
            vector = [float(x) for x in embedder.embed_documents([chunk["text"]])[0]]
        except Exception as exc:
            raise RuntimeError(f"Embedding failed for chunk {chunk['id']}: {exc}") from exc
        if dim is None:
            dim = len(vector)
        elif len(vector) != dim:
            raise ValueError(
                f"Chunk {chunk['id']} embedding has dimension {len(vector)}, expected {dim}"
            )
        items.append({"id": chunk["id"], "text": chunk["text"], "embedding": vector})
        progress = (
            100.0 if processed == len(chunks)
            else progress_checkpoint + (100.0 - progress_checkpoint) * processed / len(chunks)
        )
        log.info("  %.0f%% complete", progress)
    elapsed = time.monotonic() - t0

    # ── write output ──────────────────────────────────────────────
    filename = f"embeddings_{source_name}.json"
    out_path = Path(embeddings.path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(json.dumps({"items": items}, indent=2, ensure_ascii=False) + "\n")

    # artifact metadata
    embeddings.metadata["num_embedded"] = len(items)
    embeddings.metadata["embedding_dim"] = dim
    embeddings.metadata["embedding_model"] = embedding_model
    embeddings.metadata["source_name"] = source_name
    embeddings.metadata["filename"] = filename
    embeddings.metadata["elapsed_seconds"] = round(elapsed, 2)

    # KFP Metrics
    metrics.log_metric("chunks_embedded", len(items))
    metrics.log_metric("embedding_dim", dim)
    metrics.log_metric("embed_elapsed_seconds", round(elapsed, 2))
    metrics.log_metric("chunks_per_second",
                       round(len(items) / elapsed, 1) if elapsed > 0 else 0)

    msg = f"Embedded {len(items)} chunks (dim={dim}) in {elapsed:.1f}s"
    log.info(msg)
    return msg
