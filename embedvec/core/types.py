"""Core data types shared across ingestion and search.

The generic storage record used by every vector store is a plain dict::

    {"id": str, "vector": list[float], "text": str, "metadata": dict}

Domain entities (such as :class:`Hotel`) convert to and from that shape
through their record definition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from embedvec.core.record_definition import HOTEL_DEFINITION, RecordDefinition


@dataclass
class Hotel:
    """Hotel entity used throughout the samples and documentation.

    Attributes:
        hotel_id: Unique key of the hotel.
        hotel_name: Display name.
        description: Free text; source of ``description_embedding``.
        description_embedding: Embedding of ``description`` or None until
            one has been generated.
        tags: Free-form labels (filterable).
        rating: Optional star rating.
    """

    hotel_id: str
    hotel_name: str
    description: str
    description_embedding: Optional[List[float]] = None
    tags: List[str] = field(default_factory=list)
    rating: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.hotel_id, str) or not self.hotel_id.strip():
            raise ValueError("hotel_id must be a non-empty string")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hotel_id": self.hotel_id,
            "hotel_name": self.hotel_name,
            "description": self.description,
            "description_embedding": self.description_embedding,
            "tags": list(self.tags),
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hotel":
        embedding = data.get("description_embedding")
        return cls(
            hotel_id=str(data["hotel_id"]),
            hotel_name=str(data.get("hotel_name") or ""),
            description=str(data.get("description") or ""),
            description_embedding=list(embedding) if embedding is not None else None,
            tags=list(data.get("tags") or []),
            rating=float(data["rating"]) if data.get("rating") is not None else None,
        )

    def to_record(self, definition: RecordDefinition = HOTEL_DEFINITION) -> Dict[str, Any]:
        """Convert to the generic store record shape."""
        return definition.to_storage(self.to_dict())

    @classmethod
    def from_record(
        cls,
        record: Dict[str, Any],
        definition: RecordDefinition = HOTEL_DEFINITION,
    ) -> "Hotel":
        return cls.from_dict(definition.from_storage(record))


@dataclass
class VectorSearchOptions:
    """Options for a single vector search.

    Attributes:
        top: Maximum number of results to return.
        skip: Number of leading results to skip (for paging).
        filter: Equality filter applied to record metadata.
        include_vectors: Whether results should carry the stored vectors.
        vector_field: Vector field to search; defaults to the first one.
    """

    top: int = 3
    skip: int = 0
    filter: Optional[Dict[str, Any]] = None
    include_vectors: bool = False
    vector_field: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.top, int) or self.top <= 0:
            raise ValueError(f"top must be a positive integer, got {self.top}")
        if not isinstance(self.skip, int) or self.skip < 0:
            raise ValueError(f"skip must be a non-negative integer, got {self.skip}")


@dataclass
class SearchResult:
    """One search hit; ``score`` is always higher-is-better."""

    record: Dict[str, Any]
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"record": dict(self.record), "score": self.score}


@dataclass
class VectorSearchResults:
    results: List[SearchResult] = field(default_factory=list)
    total_count: Optional[int] = None

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_count": self.total_count,
        }
