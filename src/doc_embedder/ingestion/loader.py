"""Document decoding — best-effort text extraction from raw bytes or files.

PDF bytes are parsed with ``pypdf``; every other MIME type is decoded as
UTF-8 with replacement characters.  Extraction quality for complex
binary formats is not guaranteed, and decoding never fails on garbled
input: a PDF that cannot be parsed is decoded as text instead.
"""

from __future__ import annotations

import io
import logging
import mimetypes
import re
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_MIME_TYPE = "text/plain"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def normalise_text(text: str) -> str:
    """Strip control chars, collapse whitespace runs, trim.

    Line breaks survive (at most two in a row); every other whitespace
    run becomes a single space.
    """
    text = _CONTROL_CHARS.sub(" ", text)
    text = re.sub(r"[^\S\n]+", " ", text)       # collapse spaces (keep \n)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)       # max two consecutive newlines
    return text.strip()


def guess_mime_type(name: str) -> str:
    """Guess a MIME type from a file name, defaulting to ``text/plain``."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


def _decode_pdf(raw_bytes: bytes) -> str | None:
    try:
        reader = PdfReader(io.BytesIO(raw_bytes))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError) as exc:
        logger.warning("Could not parse PDF (%s); decoding bytes as text", exc)
        return None
    logger.info("Extracted text from %d PDF pages", len(pages))
    return "\n".join(pages)


def extract_text(raw_bytes: bytes, mime_type: str | None = None) -> str:
    """Decode *raw_bytes* into text according to *mime_type*.

    Parameters
    ----------
    raw_bytes:
        The document's content.
    mime_type:
        Content type, e.g. ``"application/pdf"`` or ``"text/plain"``.
        Parameters such as ``; charset=utf-8`` are ignored.

    Returns
    -------
    str
        Extracted text with control characters removed and whitespace
        collapsed.  May be empty or garbled, never raises on bad bytes.
    """
    base_type = (mime_type or DEFAULT_MIME_TYPE).split(";", 1)[0].strip().lower()
    text = _decode_pdf(raw_bytes) if base_type == PDF_MIME_TYPE else None
    if text is None:
        text = raw_bytes.decode("utf-8", errors="replace")
    return normalise_text(text)


def load_document(path: str | Path) -> tuple[str, str]:
    """Load a single file from disk.

    PDFs go through LangChain's ``PyPDFLoader``; everything else, and
    any PDF it cannot parse, through :func:`extract_text`.

    Returns
    -------
    tuple[str, str]
        ``(text, name)`` where *name* is the file's base name.

    Raises
    ------
    OSError
        If the file cannot be read.
    """
    path = Path(path)
    mime_type = guess_mime_type(path.name)
    if mime_type == PDF_MIME_TYPE:
        try:
            documents = PyPDFLoader(str(path)).load()
        except (PdfReadError, ValueError) as exc:
            logger.warning("PyPDFLoader failed on %s (%s); decoding bytes as text", path.name, exc)
        else:
            logger.info("Loaded %s (%d page(s))", path.name, len(documents))
            return normalise_text("\n".join(doc.page_content for doc in documents)), path.name
        mime_type = DEFAULT_MIME_TYPE

    text = extract_text(path.read_bytes(), mime_type)
    logger.info("Loaded %s (%d chars)", path.name, len(text))
    return text, path.name
