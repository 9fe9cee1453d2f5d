"""In-process vector store.

Keeps records in a dict and scores them with a linear scan. It is used
for tests, for the documentation samples, and as the default provider
when no database is configured. Nothing is persisted.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from embedvec.core.record_definition import DistanceFunction
from embedvec.libs.vector_store.base_vector_store import BaseVectorStore

logger = logging.getLogger(__name__)


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _norm(a: Sequence[float]) -> float:
    return math.sqrt(_dot(a, a))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; 0.0 when either vector has zero length."""
    denominator = _norm(a) * _norm(b)
    if denominator == 0.0:
        return 0.0
    return _dot(a, b) / denominator


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def score_vectors(
    query: Sequence[float],
    stored: Sequence[float],
    distance_function: DistanceFunction,
) -> float:
    """Compare two vectors and return a higher-is-better score.

    Distance functions are negated so callers can always sort descending.
    """
    if distance_function is DistanceFunction.COSINE_SIMILARITY:
        return cosine_similarity(query, stored)
    if distance_function is DistanceFunction.COSINE_DISTANCE:
        return -(1.0 - cosine_similarity(query, stored))
    if distance_function is DistanceFunction.DOT_PRODUCT:
        return _dot(query, stored)
    if distance_function is DistanceFunction.EUCLIDEAN_DISTANCE:
        return -euclidean_distance(query, stored)
    raise ValueError(f"Unsupported distance function: {distance_function}")


class InMemoryVectorStore(BaseVectorStore):
    """Dict-backed vector store for a single collection.

    The collection's dimension count is taken from settings when given,
    otherwise it is fixed by the first upsert.

    Example:
        >>> store = InMemoryVectorStore(collection_name="hotels")
        >>> store.upsert([{"id": "h1", "vector": [1.0, 0.0], "metadata": {}}])
        ['h1']
        >>> store.query([1.0, 0.0], top_k=1)[0]["id"]
        'h1'
    """

    def __init__(
        self,
        settings: Any = None,
        collection_name: Optional[str] = None,
        distance_function: Any = None,
        dimensions: Optional[int] = None,
    ) -> None:
        config: Dict[str, Any] = settings.vector_store if settings is not None else {}
        super().__init__(
            collection_name=collection_name or config.get("collection_name"),
            distance_function=(
                distance_function
                or config.get("distance_function")
                or DistanceFunction.COSINE_SIMILARITY
            ),
            dimensions=dimensions if dimensions is not None else config.get("dimensions"),
        )
        self._records: Dict[str, Dict[str, Any]] = {}

    def upsert(
        self,
        records: List[Dict[str, Any]],
        trace: Optional[Any] = None,
    ) -> List[str]:
        fixed_dimensions = self.dimensions
        if records and self.dimensions is None:
            first = records[0]
            if isinstance(first, dict) and isinstance(first.get("vector"), (list, tuple)) and first["vector"]:
                # Validate the batch against its own first vector
                self.dimensions = len(first["vector"])
        try:
            self.validate_records(records)
        except ValueError:
            self.dimensions = fixed_dimensions
            raise

        ids: List[str] = []
        for record in records:
            record_id = str(record["id"])
            self._records[record_id] = {
                "id": record_id,
                "vector": [float(v) for v in record["vector"]],
                "text": record.get("text", "") or "",
                "metadata": copy.deepcopy(record.get("metadata") or {}),
            }
            ids.append(record_id)

        if trace is not None:
            trace.record_stage(
                "vector_upsert",
                {"provider": "memory", "collection": self.collection_name, "count": len(ids)},
            )
        logger.debug("Upserted %d records into '%s'", len(ids), self.collection_name)
        return ids

    def query(
        self,
        vector: List[float],
        top_k: int = 10,
        filters: Optional[Dict[str, Any]] = None,
        trace: Optional[Any] = None,
        include_vectors: bool = False,
    ) -> List[Dict[str, Any]]:
        self.validate_query_vector(vector, top_k)

        scored = []
        for record in self._records.values():
            if not self.matches_filters(record["metadata"], filters):
                continue
            scored.append((score_vectors(vector, record["vector"], self.distance_function), record))

        # Ties are broken by id so results are stable
        scored.sort(key=lambda pair: (-pair[0], pair[1]["id"]))

        results = [self._to_result(record, include_vectors, score) for score, record in scored[:top_k]]
        if trace is not None:
            trace.record_stage(
                "vector_query",
                {
                    "provider": "memory",
                    "collection": self.collection_name,
                    "top_k": top_k,
                    "returned": len(results),
                },
            )
        return results

    def get_by_ids(
        self,
        ids: List[str],
        trace: Optional[Any] = None,
        include_vectors: bool = False,
    ) -> List[Dict[str, Any]]:
        if not ids:
            raise ValueError("IDs list cannot be empty")
        results: List[Dict[str, Any]] = []
        for record_id in ids:
            record = self._records.get(str(record_id))
            results.append(self._to_result(record, include_vectors) if record else {})
        return results

    def delete(self, ids: List[str], trace: Optional[Any] = None) -> None:
        if not ids:
            raise ValueError("IDs list cannot be empty")
        for record_id in ids:
            self._records.pop(str(record_id), None)

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()

    @staticmethod
    def _to_result(
        record: Dict[str, Any],
        include_vectors: bool,
        score: Optional[float] = None,
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": record["id"],
            "text": record["text"],
            "metadata": copy.deepcopy(record["metadata"]),
        }
        if score is not None:
            result["score"] = float(score)
        if include_vectors:
            result["vector"] = list(record["vector"])
        return result
