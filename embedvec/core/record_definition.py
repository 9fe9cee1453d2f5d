"""Collection schema for vector store records.

A :class:`RecordDefinition` describes which field is the key, which fields
carry data, and which fields hold vectors. Vector fields declare their
dimension count, the distance function the store should use, and
optionally the data field whose text is embedded into them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union


class DistanceFunction(str, Enum):
    """Supported vector comparison functions."""

    COSINE_SIMILARITY = "cosine_similarity"
    COSINE_DISTANCE = "cosine_distance"
    DOT_PRODUCT = "dot_product"
    EUCLIDEAN_DISTANCE = "euclidean_distance"

    @property
    def higher_is_better(self) -> bool:
        """True for similarity functions, False for distance functions."""
        return self in (DistanceFunction.COSINE_SIMILARITY, DistanceFunction.DOT_PRODUCT)

    @classmethod
    def parse(cls, value: Union[str, "DistanceFunction"]) -> "DistanceFunction":
        if isinstance(value, DistanceFunction):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        available = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown distance function: '{value}'. Available: {available}")


@dataclass(frozen=True)
class KeyField:
    name: str


@dataclass(frozen=True)
class DataField:
    name: str
    is_filterable: bool = False
    is_full_text_searchable: bool = False


@dataclass(frozen=True)
class VectorField:
    """A vector property of a record.

    Attributes:
        name: Field name.
        dimensions: Number of dimensions every stored vector must have.
        distance_function: How the store compares vectors.
        embedding_source: Name of the data field whose text is embedded
            into this vector, or None when vectors are supplied directly.
    """

    name: str
    dimensions: int
    distance_function: DistanceFunction = DistanceFunction.COSINE_SIMILARITY
    embedding_source: Optional[str] = None


RecordField = Union[KeyField, DataField, VectorField]


@dataclass
class RecordDefinition:
    """Validated set of fields describing one collection's records."""

    fields: Sequence[RecordField]
    _vector_fields: List[VectorField] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.fields = list(self.fields)
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names in record definition: {duplicates}")

        keys = [f for f in self.fields if isinstance(f, KeyField)]
        if len(keys) != 1:
            raise ValueError(
                f"Record definition must have exactly one key field, found {len(keys)}"
            )

        self._vector_fields = [f for f in self.fields if isinstance(f, VectorField)]
        if not self._vector_fields:
            raise ValueError("Record definition must have at least one vector field")

        data_names = {f.name for f in self.data_fields}
        for vector_field in self._vector_fields:
            if not isinstance(vector_field.dimensions, int) or vector_field.dimensions <= 0:
                raise ValueError(
                    f"Vector field '{vector_field.name}' must have positive dimensions, "
                    f"got {vector_field.dimensions}"
                )
            source = vector_field.embedding_source
            if source is not None and source not in data_names:
                raise ValueError(
                    f"Vector field '{vector_field.name}' has embedding_source '{source}' "
                    "which is not a data field"
                )

    @property
    def key_field(self) -> KeyField:
        return next(f for f in self.fields if isinstance(f, KeyField))

    @property
    def data_fields(self) -> List[DataField]:
        return [f for f in self.fields if isinstance(f, DataField)]

    @property
    def vector_fields(self) -> List[VectorField]:
        return list(self._vector_fields)

    @property
    def filterable_fields(self) -> List[str]:
        return [f.name for f in self.data_fields if f.is_filterable]

    def vector_field(self, name: Optional[str] = None) -> VectorField:
        """Return the named vector field, or the first one when name is None.

        Raises:
            KeyError: If no vector field has that name.
        """
        if name is None:
            return self._vector_fields[0]
        for vector_field in self._vector_fields:
            if vector_field.name == name:
                return vector_field
        raise KeyError(f"No vector field named '{name}'")

    @property
    def text_field(self) -> Optional[str]:
        """Data field stored as the record's ``text`` in the vector store."""
        source = self._vector_fields[0].embedding_source
        if source is not None:
            return source
        for data_field in self.data_fields:
            if data_field.is_full_text_searchable:
                return data_field.name
        return None

    def to_storage(self, entity: Dict[str, Any], vector_field: Optional[str] = None) -> Dict[str, Any]:
        """Map an entity dict onto the generic store record shape.

        The store record is ``{"id", "vector", "text", "metadata"}``; every
        data field other than the text field lands in ``metadata``.

        Raises:
            ValueError: If the key is missing.
        """
        key_name = self.key_field.name
        key = entity.get(key_name)
        if key is None or str(key) == "":
            raise ValueError(f"Entity is missing key field '{key_name}'")

        target = self.vector_field(vector_field)
        text_field = self.text_field
        metadata = {
            f.name: entity.get(f.name)
            for f in self.data_fields
            if f.name != text_field and f.name in entity
        }
        return {
            "id": str(key),
            "vector": entity.get(target.name),
            "text": str(entity.get(text_field) or "") if text_field else "",
            "metadata": metadata,
        }

    def from_storage(self, record: Dict[str, Any], vector_field: Optional[str] = None) -> Dict[str, Any]:
        """Inverse of :meth:`to_storage`. Missing vectors stay None."""
        entity: Dict[str, Any] = {self.key_field.name: record.get("id")}
        metadata = record.get("metadata") or {}
        for data_field in self.data_fields:
            if data_field.name in metadata:
                entity[data_field.name] = metadata[data_field.name]
        if self.text_field:
            entity[self.text_field] = record.get("text", "")
        entity[self.vector_field(vector_field).name] = record.get("vector")
        return entity


HOTEL_EMBEDDING_DIMENSIONS = 1536


def hotel_definition(
    dimensions: int = HOTEL_EMBEDDING_DIMENSIONS,
    distance_function: Union[str, DistanceFunction] = DistanceFunction.COSINE_SIMILARITY,
) -> RecordDefinition:
    """Build the hotel record definition with the given vector size."""
    return RecordDefinition(
        fields=[
            KeyField("hotel_id"),
            DataField("hotel_name", is_filterable=True),
            DataField("description", is_full_text_searchable=True),
            DataField("tags", is_filterable=True),
            DataField("rating", is_filterable=True),
            VectorField(
                "description_embedding",
                dimensions=dimensions,
                distance_function=DistanceFunction.parse(distance_function),
                embedding_source="description",
            ),
        ]
    )


HOTEL_DEFINITION = hotel_definition()
