"""Vector search service.

Embeds a text query with the configured embedding client and runs a
similarity search against a vector store, returning
:class:`~embedvec.core.types.VectorSearchResults`.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from embedvec.core.types import SearchResult, VectorSearchOptions, VectorSearchResults

if TYPE_CHECKING:
    from embedvec.core.record_definition import RecordDefinition
    from embedvec.core.settings import Settings
    from embedvec.libs.embedding.base_embedding import BaseEmbedding
    from embedvec.libs.vector_store.base_vector_store import BaseVectorStore

logger = logging.getLogger(__name__)


class VectorSearch:
    """Embedding-based similarity search over one collection.

    When a record definition is supplied, results carry entity dicts
    (``{"hotel_id": ..., "description": ...}``); otherwise they carry the
    raw store records.

    Attributes:
        embedding_client: Embedding provider used for query vectorization.
        vector_store: Store to search.
        definition: Optional record definition for entity mapping.
        default_top: Result count used when no options are given.

    Example:
        >>> search = VectorSearch(embedding, store, definition=HOTEL_DEFINITION)
        >>> results = search.search("budget hotel near the beach")
        >>> for hit in results:
        ...     print(hit.score, hit.record["hotel_name"])
    """

    def __init__(
        self,
        embedding_client: Optional[BaseEmbedding] = None,
        vector_store: Optional[BaseVectorStore] = None,
        definition: Optional[RecordDefinition] = None,
        default_top: int = 3,
    ) -> None:
        if not isinstance(default_top, int) or default_top <= 0:
            raise ValueError(f"default_top must be a positive integer, got {default_top}")
        self.embedding_client = embedding_client
        self.vector_store = vector_store
        self.definition = definition
        self.default_top = default_top

    def search(
        self,
        query: str,
        options: Optional[VectorSearchOptions] = None,
        trace: Optional[Any] = None,
    ) -> VectorSearchResults:
        """Embed *query* and return the most similar records.

        Raises:
            ValueError: If query is empty or not a string.
            RuntimeError: If dependencies are missing, or embedding or the
                store query fails.
        """
        self._validate_query(query)
        self._validate_dependencies()

        start = time.monotonic()
        try:
            query_vector = self.embedding_client.embed([query], trace=trace)[0]
        except Exception as e:
            raise RuntimeError(
                f"Failed to embed query: {e}. "
                "Check embedding client configuration and connectivity."
            ) from e
        if trace is not None:
            trace.record_stage(
                "query_embedding",
                {"query_length": len(query), "dimensions": len(query_vector)},
                elapsed_ms=(time.monotonic() - start) * 1000.0,
            )

        return self.vector_search(query_vector, options=options, trace=trace)

    def vector_search(
        self,
        vector: List[float],
        options: Optional[VectorSearchOptions] = None,
        trace: Optional[Any] = None,
    ) -> VectorSearchResults:
        """Search with a precomputed vector.

        ``options.skip`` is applied by over-fetching ``top + skip`` results
        and dropping the first ``skip``.
        """
        if self.vector_store is None:
            raise RuntimeError("VectorSearch requires a vector_store.")
        options = options or VectorSearchOptions(top=self.default_top)

        start = time.monotonic()
        try:
            raw_results = self.vector_store.query(
                vector=vector,
                top_k=options.top + options.skip,
                filters=options.filter,
                trace=trace,
                include_vectors=options.include_vectors,
            )
        except ValueError:
            raise
        except Exception as e:
            raise RuntimeError(
                f"Failed to query vector store: {e}. "
                "Check vector store configuration and data availability."
            ) from e

        results = self._transform_results(raw_results[options.skip:], options)
        if trace is not None:
            trace.record_stage(
                "vector_search",
                {
                    "collection": self.vector_store.collection_name,
                    "top": options.top,
                    "skip": options.skip,
                    "filter": options.filter,
                    "returned": len(results),
                },
                elapsed_ms=(time.monotonic() - start) * 1000.0,
            )
        logger.debug("Vector search returned %d results", len(results))
        return VectorSearchResults(results=results)

    def _transform_results(
        self,
        raw_results: List[Dict[str, Any]],
        options: VectorSearchOptions,
    ) -> List[SearchResult]:
        results = []
        for raw in raw_results:
            try:
                score = float(raw.get("score", 0.0))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping result %s with invalid score: %s", raw.get("id", "unknown"), e)
                continue
            record = dict(raw)
            record.pop("score", None)
            if self.definition is not None:
                record = self.definition.from_storage(record, vector_field=options.vector_field)
                if not options.include_vectors:
                    vector_name = self.definition.vector_field(options.vector_field).name
                    record.pop(vector_name, None)
            results.append(SearchResult(record=record, score=score))
        return results

    @staticmethod
    def _validate_query(query: str) -> None:
        if not isinstance(query, str):
            raise ValueError(f"Query must be a string, got {type(query).__name__}")
        if not query.strip():
            raise ValueError("Query cannot be empty or whitespace-only")

    def _validate_dependencies(self) -> None:
        if self.embedding_client is None:
            raise RuntimeError("VectorSearch requires an embedding_client.")
        if self.vector_store is None:
            raise RuntimeError("VectorSearch requires a vector_store.")


def create_vector_search(
    settings: Settings,
    embedding_client: Optional[BaseEmbedding] = None,
    vector_store: Optional[BaseVectorStore] = None,
    definition: Optional[RecordDefinition] = None,
) -> VectorSearch:
    """Build a :class:`VectorSearch`, creating missing dependencies from settings.

    ``search.default_top`` sets the default result count.
    """
    if embedding_client is None:
        from embedvec.libs.embedding import EmbeddingFactory
        embedding_client = EmbeddingFactory.create(settings)

    if vector_store is None:
        from embedvec.libs.vector_store import VectorStoreFactory
        vector_store = VectorStoreFactory.create(settings)

    return VectorSearch(
        embedding_client=embedding_client,
        vector_store=vector_store,
        definition=definition,
        default_top=int(settings.search.get("default_top", 3)),
    )
