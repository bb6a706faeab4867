"""Unit tests for the KFP embedding component.

The tests exercise the *Python function* behind the ``@dsl.component``
decorator (``component.python_func``), so no Kubeflow cluster is needed.
"""

from __future__ import annotations

import inspect
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest


class _FakeArtifact:
    """Minimal stand-in for ``dsl.Dataset`` / ``dsl.Metrics``."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.metadata: dict = {}
        self._metrics: dict = {}

    def log_metric(self, name: str, value) -> None:
        self._metrics[name] = value


def _mock_embeddings(fail_on: int | None = None) -> MagicMock:
    """``HuggingFaceEmbeddings`` stand-in returning ``[n, n+1, n+2, n+3]`` for call *n*."""
    calls: list[str] = []

    def embed_documents(texts: list[str]) -> list[list[float]]:
        calls.extend(texts)
        n = len(calls)
        if n == fail_on:
            raise RuntimeError("model exploded")
        return [[float(n + i) for i in range(4)]]

    instance = MagicMock()
    instance.embed_documents.side_effect = embed_documents
    return MagicMock(return_value=instance)


class TestEmbedDocument:
    """Tests for ``pipelines.components.embed_document.embed_document``."""

    def test_produces_export(self, tmp_path: Path) -> None:
        in_path = tmp_path / "letters.txt"
        in_path.write_text("a b c d e f g h i j")
        out_art = _FakeArtifact(str(tmp_path / "out" / "embeddings.json"))
        metrics = _FakeArtifact(str(tmp_path / "metrics"))

        from pipelines.components.embed_document import embed_document

        embeddings_cls = _mock_embeddings()
        with patch("langchain_huggingface.HuggingFaceEmbeddings", embeddings_cls):
            result = embed_document.python_func(
                document=_FakeArtifact(str(in_path)),
                embeddings=out_art,
                metrics=metrics,
                source_name="letters.txt",
                max_words_per_chunk=4,
            )

        payload = json.loads(Path(out_art.path).read_text())
        assert list(payload) == ["items"]
        assert [item["id"] for item in payload["items"]] == [1, 2, 3]
        assert payload["items"][2] == {"id": 3, "text": "i j", "embedding": [3.0, 4.0, 5.0, 6.0]}
        assert embeddings_cls.call_args.kwargs["encode_kwargs"] == {"normalize_embeddings": True}
        assert out_art.metadata["num_embedded"] == 3
        assert out_art.metadata["embedding_dim"] == 4
        assert out_art.metadata["filename"] == "embeddings_letters.txt.json"
        assert metrics._metrics["chunks_embedded"] == 3
        assert metrics._metrics["embedding_dim"] == 4
        assert result.startswith("Embedded 3 chunks (dim=4)")

    def test_garbled_pdf_is_decoded_as_text(self, tmp_path: Path) -> None:
        in_path = tmp_path / "x.pdf"
        in_path.write_bytes(b"not really a pdf at all")
        out_art = _FakeArtifact(str(tmp_path / "out.json"))

        from pipelines.components.embed_document import embed_document

        with patch("langchain_huggingface.HuggingFaceEmbeddings", _mock_embeddings()):
            embed_document.python_func(
                document=_FakeArtifact(str(in_path)),
                embeddings=out_art,
                metrics=_FakeArtifact(str(tmp_path / "metrics")),
                mime_type="application/pdf",
                max_words_per_chunk=4,
            )

        items = json.loads(Path(out_art.path).read_text())["items"]
        assert [item["text"] for item in items] == ["not really a pdf", "at all"]

    def test_empty_document_raises(self, tmp_path: Path) -> None:
        in_path = tmp_path / "empty.txt"
        in_path.write_text("   ")

        from pipelines.components.embed_document import embed_document

        with patch("langchain_huggingface.HuggingFaceEmbeddings", _mock_embeddings()), \
                pytest.raises(ValueError, match="no text to chunk"):
            embed_document.python_func(
                document=_FakeArtifact(str(in_path)),
                embeddings=_FakeArtifact(str(tmp_path / "out.json")),
                metrics=_FakeArtifact(str(tmp_path / "metrics")),
            )

    def test_embedding_failure_names_chunk(self, tmp_path: Path) -> None:
        in_path = tmp_path / "letters.txt"
        in_path.write_text("a b c d e f g h i j")
        out_path = tmp_path / "out.json"

        from pipelines.components.embed_document import embed_document

        with patch("langchain_huggingface.HuggingFaceEmbeddings", _mock_embeddings(fail_on=2)), \
                pytest.raises(RuntimeError, match="chunk 2"):
            embed_document.python_func(
                document=_FakeArtifact(str(in_path)),
                embeddings=_FakeArtifact(str(out_path)),
                metrics=_FakeArtifact(str(tmp_path / "metrics")),
                max_words_per_chunk=4,
            )
        assert not out_path.exists()

    def test_invalid_chunk_size_raises(self, tmp_path: Path) -> None:
        in_path = tmp_path / "letters.txt"
        in_path.write_text("a b c")

        from pipelines.components.embed_document import embed_document

        with pytest.raises(ValueError, match="max_words_per_chunk"):
            embed_document.python_func(
                document=_FakeArtifact(str(in_path)),
                embeddings=_FakeArtifact(str(tmp_path / "out.json")),
                metrics=_FakeArtifact(str(tmp_path / "metrics")),
                max_words_per_chunk=0,
            )

    def test_component_only_needs_index_packages(self) -> None:
        """The container must not import this repository's own package."""
        from pipelines.components.embed_document import embed_document

        assert "doc_embedder" not in inspect.getsource(embed_document.python_func)
