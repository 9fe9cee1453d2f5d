"""Abstract base class for VectorStore providers.

Each store instance manages one collection. Records use the generic
shape ``{"id", "vector", "text", "metadata"}``; query results add a
``score`` where higher always means more similar, whatever distance
function the collection uses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from embedvec.core.record_definition import DistanceFunction


class BaseVectorStore(ABC):
    """Abstract base class for VectorStore providers.

    Subclasses implement ``upsert``, ``query``, ``get_by_ids``,
    ``delete``, ``count`` and ``clear``. ``upsert`` must be idempotent:
    writing a record with an existing id replaces it.

    Attributes:
        collection_name: Name of the managed collection.
        distance_function: How vectors are compared.
        dimensions: Expected vector size, or None until known.
    """

    DEFAULT_COLLECTION = "hotels"

    def __init__(
        self,
        collection_name: Optional[str] = None,
        distance_function: Any = DistanceFunction.COSINE_SIMILARITY,
        dimensions: Optional[int] = None,
    ) -> None:
        self.collection_name = collection_name or self.DEFAULT_COLLECTION
        self.distance_function = DistanceFunction.parse(distance_function)
        self.dimensions = dimensions

    @abstractmethod
    def upsert(
        self,
        records: List[Dict[str, Any]],
        trace: Optional[Any] = None,
    ) -> List[str]:
        """Insert or update records.

        Args:
            records: Records with ``id``, ``vector`` and optional ``text``
                and ``metadata``.
            trace: Optional TraceContext.

        Returns:
            Record ids in input order.

        Raises:
            ValueError: If records are invalid.
            RuntimeError: If the backend write fails.
        """

    @abstractmethod
    def query(
        self,
        vector: List[float],
        top_k: int = 10,
        filters: Optional[Dict[str, Any]] = None,
        trace: Optional[Any] = None,
        include_vectors: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return up to *top_k* records most similar to *vector*.

        Each result has ``id``, ``score``, ``text`` and ``metadata`` (plus
        ``vector`` when *include_vectors* is set), best match first.
        *filters* is an equality filter on metadata; a list-valued
        metadata field matches when it contains the filter value.

        Raises:
            ValueError: If vector is empty or top_k is invalid.
            RuntimeError: If the backend query fails.
        """

    @abstractmethod
    def get_by_ids(
        self,
        ids: List[str],
        trace: Optional[Any] = None,
        include_vectors: bool = False,
    ) -> List[Dict[str, Any]]:
        """Fetch records by id, in input order; ``{}`` for missing ids."""

    @abstractmethod
    def delete(self, ids: List[str], trace: Optional[Any] = None) -> None:
        """Delete records by id; unknown ids are ignored."""

    @abstractmethod
    def count(self) -> int:
        """Number of records in the collection."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every record from the collection."""

    def validate_records(self, records: List[Dict[str, Any]]) -> None:
        """Validate records before upsert.

        Raises:
            ValueError: If records list is empty or contains invalid entries.
        """
        if not records:
            raise ValueError("Records list cannot be empty")

        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(
                    f"Record at index {i} is not a dict (type: {type(record).__name__})"
                )
            if not record.get("id"):
                raise ValueError(f"Record at index {i} is missing required field: 'id'")
            if "vector" not in record or record["vector"] is None:
                raise ValueError(f"Record at index {i} is missing required field: 'vector'")

            vector = record["vector"]
            if not isinstance(vector, (list, tuple)):
                raise ValueError(
                    f"Record at index {i} has invalid vector type: {type(vector).__name__}. "
                    "Expected list or tuple of floats."
                )
            if not vector:
                raise ValueError(f"Record at index {i} has empty vector")
            if self.dimensions is not None and len(vector) != self.dimensions:
                raise ValueError(
                    f"Record at index {i} has {len(vector)} dimensions, "
                    f"collection '{self.collection_name}' expects {self.dimensions}"
                )

    def validate_query_vector(self, vector: List[float], top_k: int) -> None:
        """Validate query parameters.

        Raises:
            ValueError: If parameters are invalid.
        """
        if not isinstance(vector, (list, tuple)):
            raise ValueError(
                f"Query vector must be a list or tuple, got {type(vector).__name__}"
            )
        if not vector:
            raise ValueError("Query vector cannot be empty")
        if self.dimensions is not None and len(vector) != self.dimensions:
            raise ValueError(
                f"Query vector has {len(vector)} dimensions, "
                f"collection '{self.collection_name}' expects {self.dimensions}"
            )
        if not isinstance(top_k, int) or top_k <= 0:
            raise ValueError(f"top_k must be a positive integer, got {top_k}")

    @staticmethod
    def matches_filters(metadata: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        if not filters:
            return True
        for key, expected in filters.items():
            actual = metadata.get(key)
            if isinstance(actual, (list, tuple)):
                if expected not in actual:
                    return False
            elif actual != expected:
                return False
        return True
