"""Hotel upserter: embeds hotel descriptions and writes them to a store.

Workflow for each call:

1. Convert :class:`Hotel` objects into entity dicts.
2. Generate ``description_embedding`` for hotels that lack one.
3. Map entities onto store records and upsert them.

The hotel id is the record key, so repeated upserts replace the stored
hotel instead of duplicating it.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from embedvec.core.record_definition import RecordDefinition, hotel_definition
from embedvec.core.settings import Settings
from embedvec.core.types import Hotel
from embedvec.ingestion.embedding_generation import TextEmbeddingCollection
from embedvec.libs.embedding import BaseEmbedding, EmbeddingFactory
from embedvec.libs.vector_store import BaseVectorStore, VectorStoreFactory

logger = logging.getLogger(__name__)


class HotelUpserter:
    """Write hotels, with generated embeddings, to a vector store.

    Dependencies are built from settings unless injected.

    Example:
        >>> upserter = HotelUpserter(settings)
        >>> ids = upserter.upsert(load_hotels("data/hotels.json"))
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        embedding: Optional[BaseEmbedding] = None,
        store: Optional[BaseVectorStore] = None,
        collection_name: Optional[str] = None,
        definition: Optional[RecordDefinition] = None,
    ) -> None:
        if settings is None and (embedding is None or store is None):
            raise ValueError("HotelUpserter needs settings or both embedding and store")

        self.embedding = embedding or EmbeddingFactory.create(settings)
        if store is None:
            kwargs = {}
            if collection_name:
                kwargs["collection_name"] = collection_name
            store = VectorStoreFactory.create(settings, **kwargs)
        self.store = store

        batch_size = 100
        if settings is not None:
            batch_size = int(settings.embedding.get("batch_size", batch_size))

        self.definition = definition or hotel_definition(
            dimensions=self._resolve_dimensions(),
            distance_function=self.store.distance_function,
        )
        self.collection = TextEmbeddingCollection(
            self.store, self.embedding, self.definition, batch_size=batch_size
        )

    def _resolve_dimensions(self) -> int:
        dimensions = self.embedding.get_dimension() or self.store.dimensions
        if not dimensions:
            raise ValueError(
                "Cannot determine embedding dimensions; set embedding.dimensions in settings"
            )
        return int(dimensions)

    def upsert(self, hotels: List[Hotel], trace: Optional[Any] = None) -> List[str]:
        """Embed and upsert hotels. Returns the hotel ids in input order.

        Raises:
            ValueError: If hotels is empty or an embedding has the wrong size.
            RuntimeError: If the store write fails.
        """
        if not hotels:
            raise ValueError("Cannot upsert empty hotels list")

        entities = [hotel.to_dict() for hotel in hotels]
        try:
            ids = self.collection.upsert(entities, trace=trace)
        except ValueError:
            raise
        except Exception as e:
            raise RuntimeError(f"Vector store upsert failed: {e}") from e

        logger.info(
            "Upserted %d hotels into collection '%s'", len(ids), self.store.collection_name
        )
        return ids

    def upsert_batch(
        self,
        batches: List[Tuple[Hotel, ...] | List[Hotel]],
        trace: Optional[Any] = None,
    ) -> List[str]:
        """Flatten several hotel batches into one upsert call."""
        all_hotels: List[Hotel] = []
        for batch in batches:
            all_hotels.extend(batch)
        return self.upsert(all_hotels, trace=trace)
