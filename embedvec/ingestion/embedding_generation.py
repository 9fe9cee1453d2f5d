"""Embedding generation for records on their way into a vector store.

Two ways of producing embeddings are supported:

- :class:`EmbeddingGenerator` fills the vector fields of entity dicts
  explicitly, before the caller upserts them.
- :class:`TextEmbeddingCollection` decorates a vector store so that
  ``upsert`` generates any missing embeddings and ``search`` accepts plain
  text, embedding it first.

In both cases the record definition decides which data field feeds which
vector field (``VectorField.embedding_source``).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from embedvec.core.record_definition import RecordDefinition, VectorField
from embedvec.core.search import VectorSearch
from embedvec.core.types import VectorSearchOptions, VectorSearchResults
from embedvec.libs.embedding.base_embedding import BaseEmbedding
from embedvec.libs.vector_store.base_vector_store import BaseVectorStore

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """Fill vector fields from their embedding source text.

    Only fields that declare an ``embedding_source`` and do not already
    hold a vector are generated. Texts are embedded in batches of
    ``batch_size`` and vectors are assigned back in input order.

    Example:
        >>> generator = EmbeddingGenerator(HashEmbedding(dimensions=8), hotel_definition(8))
        >>> [hotel] = generator.generate([{"hotel_id": "1", "description": "Quiet rooms"}])
        >>> len(hotel["description_embedding"])
        8
    """

    def __init__(
        self,
        embedding: BaseEmbedding,
        definition: RecordDefinition,
        batch_size: int = 100,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.embedding = embedding
        self.definition = definition
        self.batch_size = batch_size

    def generate(
        self,
        entities: List[Dict[str, Any]],
        trace: Optional[Any] = None,
    ) -> List[Dict[str, Any]]:
        """Return copies of *entities* with generated vectors filled in.

        Entities whose source text is missing or blank are left without a
        vector.

        Raises:
            ValueError: If a generated vector does not match the field's
                declared dimensions.
        """
        start = time.monotonic()
        results = [dict(entity) for entity in entities]
        generated = 0

        for vector_field in self.definition.vector_fields:
            if vector_field.embedding_source is None:
                continue
            pending = [
                i
                for i, entity in enumerate(results)
                if entity.get(vector_field.name) is None
                and isinstance(entity.get(vector_field.embedding_source), str)
                and entity[vector_field.embedding_source].strip()
            ]
            skipped = sum(1 for entity in results if entity.get(vector_field.name) is None) - len(pending)
            if skipped:
                logger.warning(
                    "%d record(s) have no '%s' text; '%s' left empty",
                    skipped,
                    vector_field.embedding_source,
                    vector_field.name,
                )

            for offset in range(0, len(pending), self.batch_size):
                batch = pending[offset:offset + self.batch_size]
                texts = [results[i][vector_field.embedding_source] for i in batch]
                vectors = self.embedding.embed(texts, trace=trace)
                if len(vectors) != len(batch):
                    raise ValueError(
                        f"Embedding returned {len(vectors)} vectors for {len(batch)} texts"
                    )
                for i, vector in zip(batch, vectors):
                    self._check_dimensions(vector_field, vector)
                    results[i][vector_field.name] = list(vector)
                generated += len(batch)

        if trace is not None:
            trace.record_stage(
                "embedding_generation",
                {"records": len(results), "generated": generated, "batch_size": self.batch_size},
                elapsed_ms=(time.monotonic() - start) * 1000.0,
            )
        return results

    @staticmethod
    def _check_dimensions(vector_field: VectorField, vector: List[float]) -> None:
        if len(vector) != vector_field.dimensions:
            raise ValueError(
                f"Embedding for '{vector_field.name}' has {len(vector)} dimensions, "
                f"the field is declared with {vector_field.dimensions}. "
                "Use a model or 'dimensions' setting that matches the collection."
            )


class TextEmbeddingCollection:
    """Vector store decorator that generates embeddings automatically.

    Works on entity dicts (keyed by the record definition's field names)
    rather than raw store records.

    Example:
        >>> collection = TextEmbeddingCollection(store, embedding, HOTEL_DEFINITION)
        >>> collection.upsert([hotel.to_dict()])
        >>> results = collection.search("hotel with a rooftop pool")
    """

    def __init__(
        self,
        store: BaseVectorStore,
        embedding: BaseEmbedding,
        definition: RecordDefinition,
        batch_size: int = 100,
    ) -> None:
        self.store = store
        self.embedding = embedding
        self.definition = definition
        self.generator = EmbeddingGenerator(embedding, definition, batch_size=batch_size)
        self.searcher = VectorSearch(embedding, store, definition=definition)

    @property
    def collection_name(self) -> str:
        return self.store.collection_name

    def upsert(
        self,
        entities: List[Dict[str, Any]],
        trace: Optional[Any] = None,
    ) -> List[str]:
        """Generate missing embeddings, then upsert. Returns the keys."""
        if not entities:
            raise ValueError("Entities list cannot be empty")
        with_vectors = self.generator.generate(entities, trace=trace)
        records = [self.definition.to_storage(entity) for entity in with_vectors]
        return self.store.upsert(records, trace=trace)

    def get(
        self,
        keys: List[str],
        include_vectors: bool = False,
    ) -> List[Optional[Dict[str, Any]]]:
        """Fetch entities by key; None for keys that are not stored."""
        records = self.store.get_by_ids(keys, include_vectors=include_vectors)
        return [self.definition.from_storage(r) if r else None for r in records]

    def delete(self, keys: List[str]) -> None:
        self.store.delete(keys)

    def search(
        self,
        text: str,
        options: Optional[VectorSearchOptions] = None,
        trace: Optional[Any] = None,
    ) -> VectorSearchResults:
        """Embed *text* and run a vector search with it."""
        return self.searcher.search(text, options=options, trace=trace)

    def vector_search(
        self,
        vector: List[float],
        options: Optional[VectorSearchOptions] = None,
        trace: Optional[Any] = None,
    ) -> VectorSearchResults:
        return self.searcher.vector_search(vector, options=options, trace=trace)

    def __getattr__(self, name: str) -> Any:
        # Anything not decorated goes straight to the wrapped store
        if name == "store":
            raise AttributeError(name)
        return getattr(self.store, name)
