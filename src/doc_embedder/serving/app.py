"""FastAPI application exposing the embedding pipeline as a REST API."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel

from doc_embedder.errors import (
    DocEmbedderError,
    EmptyDocumentError,
    InvalidConfigurationError,
    OperationInProgressError,
)
from doc_embedder.ingestion.loader import extract_text, guess_mime_type
from doc_embedder.pipeline.controller import PipelineController

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Document Embedding API",
    version="0.1.0",
    description="Upload a document, chunk it, and generate sentence embeddings.",
)


@lru_cache(maxsize=1)
def get_controller() -> PipelineController:
    """Process-wide controller; overridden in tests via ``dependency_overrides``."""
    return PipelineController()


# ── Request / Response schemas ────────────────────────────────────────
class ErrorInfo(BaseModel):
    """Descriptor of the failure that ended the last run."""

    kind: str
    message: str
    chunk_id: int | None = None


class StatusResponse(BaseModel):
    """Current pipeline status."""

    phase: str
    source_name: str
    num_chunks: int
    num_results: int
    progress: float
    dimension: int | None = None
    model_name: str | None = None
    last_error: ErrorInfo | None = None


class ChunkPreview(BaseModel):
    id: int
    text: str


class SubmitResponse(StatusResponse):
    """Status after a document was chunked, with the first few chunks."""

    preview: list[ChunkPreview] = []


def _status(controller: PipelineController) -> dict[str, Any]:
    return controller.snapshot()


def _run_embedding(controller: PipelineController) -> None:
    try:
        controller.start_embedding()
    except DocEmbedderError as exc:
        # Already recorded on the controller state; surfaced through /status.
        logger.warning("Background embedding run ended: %s", exc.to_dict())


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


@app.get("/status", response_model=StatusResponse)
def status(controller: PipelineController = Depends(get_controller)) -> dict[str, Any]:
    """Return phase, progress, and the last error."""
    return _status(controller)


@app.post("/documents", response_model=SubmitResponse)
async def submit_document(
    request: Request,
    name: str = Query(default="document", min_length=1),
    controller: PipelineController = Depends(get_controller),
) -> dict[str, Any]:
    """Decode the raw request body and chunk it.

    The body is the file's bytes; ``Content-Type`` selects the decoder
    (falling back to a guess from *name*).
    """
    raw = await request.body()
    mime_type = request.headers.get("content-type") or guess_mime_type(name)
    try:
        text = await run_in_threadpool(extract_text, raw, mime_type)
        chunks = await run_in_threadpool(controller.submit_document, text, source_name=name)
    except OperationInProgressError as exc:
        raise HTTPException(status_code=409, detail=exc.to_dict()) from exc
    except (EmptyDocumentError, InvalidConfigurationError) as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc

    status = await run_in_threadpool(_status, controller)
    return {
        **status,
        "preview": [{"id": c.id, "text": c.preview()} for c in chunks[:3]],
    }


@app.post("/embeddings", response_model=StatusResponse, status_code=202)
def start_embedding(
    background_tasks: BackgroundTasks,
    controller: PipelineController = Depends(get_controller),
) -> dict[str, Any]:
    """Start generating embeddings in the background; poll ``/status``."""
    snapshot = _status(controller)
    if snapshot["phase"] not in ("chunked", "embedding", "complete"):
        raise HTTPException(
            status_code=409,
            detail={"kind": "InvalidState", "message": f"Pipeline is {snapshot['phase']!r}"},
        )
    if snapshot["phase"] == "chunked":
        background_tasks.add_task(_run_embedding, controller)
    return snapshot


@app.post("/embeddings/cancel", response_model=StatusResponse)
def cancel_embedding(controller: PipelineController = Depends(get_controller)) -> dict[str, Any]:
    """Stop the running job before its next chunk."""
    controller.cancel()
    return _status(controller)


@app.get("/export")
def export(controller: PipelineController = Depends(get_controller)) -> Response:
    """Download the embeddings as ``embeddings_<name>.json``."""
    try:
        document = controller.export()
    except DocEmbedderError as exc:
        raise HTTPException(status_code=409, detail=exc.to_dict()) from exc

    return Response(
        content=document.to_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
