"""Command-line entry point: ``python -m doc_embedder <file>``."""

from __future__ import annotations

import argparse
import logging
import sys

from doc_embedder.config import settings
from doc_embedder.errors import DocEmbedderError
from doc_embedder.export.assembler import write_export
from doc_embedder.ingestion.loader import load_document
from doc_embedder.pipeline.controller import PipelineController

logger = logging.getLogger("doc_embedder")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doc_embedder",
        description="Chunk a document and export sentence embeddings as JSON",
    )
    parser.add_argument("path", help="Text or PDF file to embed")
    parser.add_argument(
        "--max-words",
        type=int,
        default=settings.max_words_per_chunk,
        help="Maximum words per chunk",
    )
    parser.add_argument(
        "--output-dir",
        default=settings.export_dir,
        help="Directory for embeddings_<name>.json",
    )
    parser.add_argument("--model", default=settings.embedding_model, help="HuggingFace model id")
    parser.add_argument(
        "--checkpoint",
        type=float,
        default=settings.progress_checkpoint,
        help="Progress reported once the model is loaded",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())

    from doc_embedder.embedding.huggingface import HuggingFaceEmbeddingModel

    try:
        text, name = load_document(args.path)
        controller = PipelineController(
            HuggingFaceEmbeddingModel(args.model),
            max_words_per_chunk=args.max_words,
            checkpoint=args.checkpoint,
        )
        controller.submit_document(text, source_name=name)
        controller.start_embedding(
            on_progress=lambda value: logger.info("%d%% complete", round(value))
        )
        out_path = write_export(controller.export(), args.output_dir)
    except (DocEmbedderError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    print(out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
