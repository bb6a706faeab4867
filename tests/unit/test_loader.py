"""Unit tests for document decoding."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from langchain_core.documents import Document
from pypdf.errors import PdfReadError

from doc_embedder.ingestion.loader import extract_text, guess_mime_type, load_document


def test_extract_plain_text() -> None:
    assert extract_text(b"hello world\n", "text/plain") == "hello world"


def test_extract_text_ignores_charset_parameter() -> None:
    assert extract_text("naïve".encode(), "text/plain; charset=utf-8") == "naïve"


def test_extract_text_defaults_to_plain_text() -> None:
    assert extract_text(b"abc") == "abc"


def test_control_characters_become_spaces() -> None:
    assert extract_text(b"one\x00two\x07three\x1f", "text/plain") == "one two three"


def test_line_breaks_survive() -> None:
    assert extract_text(b"line one\nline two", "text/markdown") == "line one\nline two"


def test_invalid_utf8_is_replaced_not_raised() -> None:
    text = extract_text(b"ok \xff\xfe bytes", "application/octet-stream")
    assert text.startswith("ok ")
    assert text.endswith(" bytes")
    assert "�" in text


def test_extract_pdf_uses_pdf_reader() -> None:
    pages = [MagicMock(), MagicMock(), MagicMock()]
    pages[0].extract_text.return_value = "First page."
    pages[1].extract_text.return_value = None
    pages[2].extract_text.return_value = "Third\x0cpage."
    reader = MagicMock(pages=pages)

    with patch("doc_embedder.ingestion.loader.PdfReader", return_value=reader) as mock_reader:
        text = extract_text(b"%PDF-1.4 ...", "application/pdf")

    mock_reader.assert_called_once()
    assert text == "First page.\n\nThird page."


def test_guess_mime_type() -> None:
    assert guess_mime_type("report.pdf") == "application/pdf"
    assert guess_mime_type("notes.txt") == "text/plain"
    assert guess_mime_type("no_extension") == "text/plain"


def test_load_text_document(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("alpha beta\ngamma", encoding="utf-8")

    text, name = load_document(path)

    assert text == "alpha beta\ngamma"
    assert name == "notes.txt"


def test_load_pdf_document_uses_pypdf_loader(tmp_path: Path) -> None:
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.4")
    loader = MagicMock()
    loader.load.return_value = [
        Document(page_content="Page one.", metadata={"page": 0}),
        Document(page_content="Page two.", metadata={"page": 1}),
    ]

    with patch("doc_embedder.ingestion.loader.PyPDFLoader", return_value=loader) as mock_cls:
        text, name = load_document(path)

    mock_cls.assert_called_once_with(str(path))
    assert text == "Page one.\nPage two."
    assert name == "paper.pdf"


def test_whitespace_runs_are_collapsed() -> None:
    raw = b"alpha   beta\t\tgamma \r\n delta\n\n\n\n\nepsilon"
    assert extract_text(raw, "text/plain") == "alpha beta gamma\ndelta\n\nepsilon"


def test_unparseable_pdf_falls_back_to_text() -> None:
    assert extract_text(b"not really a pdf at all", "application/pdf") == "not really a pdf at all"


def test_pdf_reader_error_falls_back_to_text() -> None:
    with patch(
        "doc_embedder.ingestion.loader.PdfReader", side_effect=PdfReadError("EOF marker not found")
    ):
        assert extract_text(b"%PDF-1.4 broken", "application/pdf") == "%PDF-1.4 broken"


def test_load_latin1_text_document_does_not_raise(tmp_path: Path) -> None:
    path = tmp_path / "menu.txt"
    path.write_bytes("café au lait".encode("latin-1"))

    text, name = load_document(path)

    assert text == "caf� au lait"
    assert name == "menu.txt"


def test_load_broken_pdf_document_falls_back_to_text(tmp_path: Path) -> None:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"plain words pretending")

    with patch(
        "doc_embedder.ingestion.loader.PyPDFLoader", side_effect=PdfReadError("Invalid header")
    ):
        text, name = load_document(path)

    assert text == "plain words pretending"
    assert name == "broken.pdf"
