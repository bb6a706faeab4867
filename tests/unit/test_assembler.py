"""Unit tests for result assembly and export."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from doc_embedder.errors import EmptyResultSetError
from doc_embedder.export.assembler import assemble, write_export
from doc_embedder.models import EmbeddedChunk


def _results() -> list[EmbeddedChunk]:
    return [
        EmbeddedChunk(id=1, text="a b c d", embedding=[0.1, 0.2, 0.3, 0.4]),
        EmbeddedChunk(id=2, text="e f g h", embedding=[0.5, 0.6, 0.7, 0.8]),
        EmbeddedChunk(id=3, text="i j", embedding=[0.9, 1.0, 1.1, 1.2]),
    ]


def test_assemble_empty_raises() -> None:
    with pytest.raises(EmptyResultSetError):
        assemble([])


def test_assemble_dimension_from_first_item() -> None:
    document = assemble(_results(), source_name="notes.txt")
    assert document.dimension == 4
    assert all(len(item.embedding) == document.dimension for item in document.items)
    assert document.source_name == "notes.txt"


def test_assemble_preserves_order() -> None:
    document = assemble(_results())
    assert [item.id for item in document.items] == [1, 2, 3]
    assert document.items[2].text == "i j"


def test_to_json_shape_and_key_order() -> None:
    payload_text = assemble(_results(), "notes.txt").to_json()
    payload = json.loads(payload_text)

    assert list(payload) == ["items"]
    assert list(payload["items"][0]) == ["id", "text", "embedding"]
    assert payload["items"][1] == {"id": 2, "text": "e f g h", "embedding": [0.5, 0.6, 0.7, 0.8]}
    # pretty-printed with two-space indent
    assert payload_text.startswith('{\n  "items": [')


def test_to_json_is_reproducible() -> None:
    assert assemble(_results()).to_json() == assemble(_results()).to_json()


def test_filename_convention() -> None:
    assert assemble(_results(), "report.pdf").filename == "embeddings_report.pdf.json"


def test_default_source_name() -> None:
    assert assemble(_results()).filename == "embeddings_document.json"


def test_write_export(tmp_path: Path) -> None:
    out = write_export(assemble(_results(), "notes.txt"), tmp_path / "exports")
    assert out == tmp_path / "exports" / "embeddings_notes.txt.json"
    assert len(json.loads(out.read_text())["items"]) == 3


def test_unicode_text_is_kept_verbatim(tmp_path: Path) -> None:
    results = [EmbeddedChunk(id=1, text="café naïve", embedding=[1.0])]
    out = write_export(assemble(results, "u.txt"), tmp_path)
    assert "café naïve" in out.read_text(encoding="utf-8")
