"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from doc_embedder.embedding.base import EmbeddingModel


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


class FakeEmbeddingModel(EmbeddingModel):
    """Deterministic in-memory model.

    The *n*-th call (1-based) returns ``[n, n + 1, ...]`` of length
    ``dimension``.  Behaviour can be tweaked per test:

    * ``fail_on`` — call numbers that raise ``RuntimeError``;
    * ``dimension_overrides`` — call number → vector length;
    * ``before_embed`` — hook invoked with the call number before embedding;
    * ``load_error`` — exception raised by :meth:`load`.
    """

    def __init__(self, dimension: int = 4) -> None:
        super().__init__("fake-model")
        self._dim = dimension
        self.calls: list[str] = []
        self.load_calls = 0
        self.fail_on: set[int] = set()
        self.dimension_overrides: dict[int, int] = {}
        self.before_embed: Callable[[int], None] | None = None
        self.load_error: Exception | None = None

    def load(self) -> None:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        n = len(self.calls)
        if self.before_embed is not None:
            self.before_embed(n)
        if n in self.fail_on:
            raise RuntimeError(f"model exploded on call {n}")
        dim = self.dimension_overrides.get(n, self._dim)
        return [float(n + i) for i in range(dim)]

    @property
    def dimension(self) -> int:
        return self._dim


@pytest.fixture()
def fake_model() -> FakeEmbeddingModel:
    return FakeEmbeddingModel(dimension=4)


@pytest.fixture()
def ten_words() -> str:
    return "a b c d e f g h i j"
