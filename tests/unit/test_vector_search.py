"""Tests for VectorSearch with fake embedding and store collaborators."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from embedvec.core.record_definition import hotel_definition
from embedvec.core.search import VectorSearch, create_vector_search
from embedvec.core.trace import TraceContext
from embedvec.core.types import VectorSearchOptions
from embedvec.libs.embedding import BaseEmbedding, HashEmbedding
from embedvec.libs.vector_store import InMemoryVectorStore


class FakeEmbedding(BaseEmbedding):
    def __init__(self, vector: Optional[List[float]] = None, error: Optional[Exception] = None) -> None:
        self.vector = vector or [1.0, 0.0]
        self.error = error
        self.calls: List[List[str]] = []

    def embed(self, texts: List[str], trace: Any = None) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.error is not None:
            raise self.error
        return [list(self.vector) for _ in texts]


class FakeStore:
    collection_name = "fake"

    def __init__(self, results: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None) -> None:
        self.results = results or []
        self.error = error
        self.last_call: Dict[str, Any] = {}

    def query(self, vector, top_k, filters=None, trace=None, include_vectors=False):
        self.last_call = {
            "vector": vector,
            "top_k": top_k,
            "filters": filters,
            "include_vectors": include_vectors,
        }
        if self.error is not None:
            raise self.error
        return self.results[:top_k]


def _raw(i: int, score: float) -> Dict[str, Any]:
    return {
        "id": str(i),
        "score": score,
        "text": f"hotel {i}",
        "vector": [float(i), 0.0],
        "metadata": {"hotel_name": f"Hotel {i}"},
    }


class TestSearch:
    def test_embeds_query_and_returns_results(self) -> None:
        embedding = FakeEmbedding()
        store = FakeStore([_raw(1, 0.9), _raw(2, 0.5)])

        results = VectorSearch(embedding, store).search("pool", VectorSearchOptions(top=2))

        assert embedding.calls == [["pool"]]
        assert store.last_call["vector"] == [1.0, 0.0]
        assert [r.score for r in results] == [0.9, 0.5]
        assert results.results[0].record["id"] == "1"
        assert "score" not in results.results[0].record

    def test_skip_over_fetches_then_drops(self) -> None:
        store = FakeStore([_raw(i, 1.0 - i / 10) for i in range(6)])

        results = VectorSearch(FakeEmbedding(), store).search(
            "pool", VectorSearchOptions(top=2, skip=3)
        )

        assert store.last_call["top_k"] == 5
        assert [r.record["id"] for r in results] == ["3", "4"]

    def test_default_top_used_without_options(self) -> None:
        store = FakeStore([_raw(i, 0.5) for i in range(10)])

        results = VectorSearch(FakeEmbedding(), store, default_top=4).search("pool")

        assert len(results) == 4

    def test_filter_passed_to_store(self) -> None:
        store = FakeStore()

        VectorSearch(FakeEmbedding(), store).search(
            "pool", VectorSearchOptions(filter={"tags": "spa"})
        )

        assert store.last_call["filters"] == {"tags": "spa"}

    def test_definition_maps_to_entities_and_drops_vectors(self) -> None:
        store = FakeStore([_raw(1, 0.9)])
        search = VectorSearch(FakeEmbedding(), store, definition=hotel_definition(2))

        [hit] = search.search("pool").results

        assert hit.record == {"hotel_id": "1", "hotel_name": "Hotel 1", "description": "hotel 1"}

    def test_include_vectors_keeps_vector(self) -> None:
        store = FakeStore([_raw(1, 0.9)])
        search = VectorSearch(FakeEmbedding(), store, definition=hotel_definition(2))

        [hit] = search.search("pool", VectorSearchOptions(include_vectors=True)).results

        assert store.last_call["include_vectors"] is True
        assert hit.record["description_embedding"] == [1.0, 0.0]

    @pytest.mark.parametrize("query", ["", "   ", None, 42])
    def test_invalid_query(self, query) -> None:
        with pytest.raises(ValueError):
            VectorSearch(FakeEmbedding(), FakeStore()).search(query)

    def test_missing_dependencies(self) -> None:
        with pytest.raises(RuntimeError, match="embedding_client"):
            VectorSearch(vector_store=FakeStore()).search("pool")
        with pytest.raises(RuntimeError, match="vector_store"):
            VectorSearch(embedding_client=FakeEmbedding()).search("pool")

    def test_embedding_failure_wrapped(self) -> None:
        search = VectorSearch(FakeEmbedding(error=ConnectionError("down")), FakeStore())

        with pytest.raises(RuntimeError, match="Failed to embed query"):
            search.search("pool")

    def test_store_failure_wrapped(self) -> None:
        search = VectorSearch(FakeEmbedding(), FakeStore(error=ConnectionError("down")))

        with pytest.raises(RuntimeError, match="Failed to query vector store"):
            search.search("pool")

    def test_store_value_error_propagates(self) -> None:
        search = VectorSearch(FakeEmbedding(), FakeStore(error=ValueError("bad dims")))

        with pytest.raises(ValueError, match="bad dims"):
            search.search("pool")

    def test_invalid_default_top(self) -> None:
        with pytest.raises(ValueError):
            VectorSearch(default_top=0)

    def test_records_trace_stages(self) -> None:
        trace = TraceContext()
        store = FakeStore([_raw(1, 0.9)])

        VectorSearch(FakeEmbedding(), store).search("pool", trace=trace)

        assert trace.get_stage_data("query_embedding") == {"query_length": 4, "dimensions": 2}
        assert trace.get_stage_data("vector_search")["returned"] == 1
        assert trace.get_stage_data("vector_search")["collection"] == "fake"


class TestVectorSearch:
    def test_searches_with_given_vector(self) -> None:
        store = FakeStore([_raw(1, 0.9)])
        embedding = FakeEmbedding()

        results = VectorSearch(embedding, store).vector_search([0.0, 1.0])

        assert embedding.calls == []
        assert store.last_call["vector"] == [0.0, 1.0]
        assert len(results) == 1

    def test_works_without_embedding_client(self) -> None:
        results = VectorSearch(vector_store=FakeStore([_raw(1, 0.9)])).vector_search([0.0, 1.0])

        assert results.to_dict()["results"][0]["score"] == 0.9


def test_create_vector_search_from_settings(settings_factory) -> None:
    search = create_vector_search(settings_factory(search={"default_top": 5}))

    assert isinstance(search.embedding_client, HashEmbedding)
    assert isinstance(search.vector_store, InMemoryVectorStore)
    assert search.default_top == 5
