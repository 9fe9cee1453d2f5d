"""Contract tests for BaseVectorStore shape and VectorStoreFactory routing."""

from __future__ import annotations

from typing import Any

import pytest

from embedvec.core.settings import Settings
from embedvec.libs.vector_store import InMemoryVectorStore, VectorStoreFactory
from embedvec.libs.vector_store.base_vector_store import BaseVectorStore


class _FakeVectorStore(BaseVectorStore):
    def __init__(self, settings: Settings, collection_name: str | None = None) -> None:
        super().__init__(collection_name=collection_name)
        self._records: dict[str, dict[str, Any]] = {}

    def upsert(self, records, trace=None):
        self.validate_records(records)
        for record in records:
            self._records[record["id"]] = record
        return [r["id"] for r in records]

    def query(self, vector, top_k=10, filters=None, trace=None, include_vectors=False):
        self.validate_query_vector(vector, top_k)
        matched = [
            r for r in self._records.values()
            if self.matches_filters(r.get("metadata", {}), filters)
        ]
        return [
            {"id": r["id"], "score": 1.0, "text": r.get("text", ""), "metadata": r.get("metadata", {})}
            for r in matched[:top_k]
        ]

    def get_by_ids(self, ids, trace=None, include_vectors=False):
        return [self._records.get(i, {}) for i in ids]

    def delete(self, ids, trace=None):
        for i in ids:
            self._records.pop(i, None)

    def count(self):
        return len(self._records)

    def clear(self):
        self._records.clear()


def _make_settings(provider: str) -> Settings:
    return Settings.from_dict(
        {"embedding": {"provider": "hash"}, "vector_store": {"provider": provider}, "search": {}}
    )


def test_contract_upsert_and_query_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(VectorStoreFactory, "_registry", {"fake": _FakeVectorStore})
    store = VectorStoreFactory.create(_make_settings("fake"))

    ids = store.upsert(
        [
            {"id": "hotel-1", "vector": [0.1, 0.2], "metadata": {"tags": ["pool"]}},
            {"id": "hotel-2", "vector": [0.2, 0.3], "metadata": {"tags": ["spa"]}},
        ]
    )
    results = store.query(vector=[0.2, 0.3], top_k=1, filters={"tags": "pool"})

    assert ids == ["hotel-1", "hotel-2"]
    assert len(results) == 1
    assert set(results[0].keys()) >= {"id", "score", "text", "metadata"}
    assert results[0]["id"] == "hotel-1"
    assert isinstance(results[0]["score"], float)


def test_factory_passes_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(VectorStoreFactory, "_registry", {"fake": _FakeVectorStore})

    store = VectorStoreFactory.create(_make_settings("FAKE"), collection_name="other")

    assert store.collection_name == "other"


def test_factory_with_missing_provider_raises_value_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(VectorStoreFactory, "_registry", {"fake": _FakeVectorStore})

    with pytest.raises(ValueError, match=r"vector_store\.provider"):
        VectorStoreFactory.create(_make_settings(""))


def test_factory_with_unknown_provider_raises_value_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(VectorStoreFactory, "_registry", {"fake": _FakeVectorStore})

    with pytest.raises(ValueError, match=r"Unsupported vector_store\.provider"):
        VectorStoreFactory.create(_make_settings("unknown"))


def test_factory_wraps_constructor_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    class _Broken(_FakeVectorStore):
        def __init__(self, settings: Settings) -> None:
            raise OSError("disk full")

    monkeypatch.setattr(VectorStoreFactory, "_registry", {"broken": _Broken})

    with pytest.raises(RuntimeError, match="disk full"):
        VectorStoreFactory.create(_make_settings("broken"))


def test_register_provider_rejects_non_store_classes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(VectorStoreFactory, "_registry", {})

    with pytest.raises(ValueError, match="BaseVectorStore"):
        VectorStoreFactory.register_provider("bad", dict)  # type: ignore[arg-type]


def test_builtin_providers_registered() -> None:
    assert {"memory", "chroma"} <= set(VectorStoreFactory.list_providers())
    store = VectorStoreFactory.create(_make_settings("memory"))
    assert isinstance(store, InMemoryVectorStore)


@pytest.mark.parametrize(
    ("records", "message"),
    [
        ([], "cannot be empty"),
        (["not a dict"], "not a dict"),
        ([{"vector": [1.0]}], "'id'"),
        ([{"id": "a"}], "'vector'"),
        ([{"id": "a", "vector": "xyz"}], "invalid vector type"),
        ([{"id": "a", "vector": []}], "empty vector"),
    ],
)
def test_validate_records_rejects_invalid_input(records: list, message: str) -> None:
    store = InMemoryVectorStore(dimensions=2)

    with pytest.raises(ValueError, match=message):
        store.validate_records(records)


def test_validate_query_vector_rejects_invalid_input() -> None:
    store = InMemoryVectorStore(dimensions=2)

    with pytest.raises(ValueError, match="cannot be empty"):
        store.validate_query_vector([], 1)
    with pytest.raises(ValueError, match="top_k"):
        store.validate_query_vector([1.0, 0.0], 0)
    with pytest.raises(ValueError, match="expects 2"):
        store.validate_query_vector([1.0], 1)
