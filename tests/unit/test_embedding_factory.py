"""Unit tests for EmbeddingFactory provider routing."""

from __future__ import annotations

import pytest

from embedvec.core.settings import Settings
from embedvec.libs.embedding import EmbeddingFactory, HashEmbedding
from embedvec.libs.embedding.base_embedding import BaseEmbedding


class _FakeEmbedding(BaseEmbedding):
    def __init__(self, settings: Settings) -> None:
        self._provider = str(settings.embedding.get("provider", "unknown"))

    def embed(self, texts: list[str], trace: object | None = None) -> list[list[float]]:
        return [[float(len(text)), float(len(self._provider))] for text in texts]


def _make_settings(provider: str) -> Settings:
    return Settings.from_dict(
        {
            "embedding": {"provider": provider},
            "vector_store": {"provider": "memory"},
            "search": {},
        }
    )


def test_create_with_registered_provider_returns_expected_embedding(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(EmbeddingFactory, "_registry", {"fake": _FakeEmbedding})
    settings = _make_settings(" Fake ")

    embedding = EmbeddingFactory.create(settings)

    assert isinstance(embedding, _FakeEmbedding)
    assert embedding.embed(["hi", "hello"]) == [[2.0, 4.0], [5.0, 4.0]]


def test_create_with_missing_provider_raises_value_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(EmbeddingFactory, "_registry", {"fake": _FakeEmbedding})

    with pytest.raises(ValueError, match=r"embedding\.provider"):
        EmbeddingFactory.create(_make_settings(""))


def test_create_with_unknown_provider_raises_value_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(EmbeddingFactory, "_registry", {"fake": _FakeEmbedding})

    with pytest.raises(ValueError, match=r"Unsupported embedding\.provider"):
        EmbeddingFactory.create(_make_settings("unknown"))


def test_register_rejects_blank_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(EmbeddingFactory, "_registry", {})

    with pytest.raises(ValueError):
        EmbeddingFactory.register("  ", _FakeEmbedding)


def test_builtin_providers_are_registered() -> None:
    assert {"openai", "azure", "hash"} <= set(EmbeddingFactory.list_providers())


def test_hash_provider_reads_dimensions_from_settings() -> None:
    settings = Settings.from_dict(
        {"embedding": {"provider": "hash", "dimensions": 16}, "vector_store": {}, "search": {}}
    )

    embedding = EmbeddingFactory.create(settings)

    assert isinstance(embedding, HashEmbedding)
    assert embedding.get_dimension() == 16
