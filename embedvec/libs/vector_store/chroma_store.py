"""ChromaDB vector store provider.

Maps the generic record shape onto a Chroma collection:

- ``id`` -> Chroma id, ``vector`` -> embedding, ``text`` -> document.
- ``metadata`` -> Chroma metadata. Chroma only stores scalar values, so
  ``None`` values are dropped and lists are stored JSON-encoded, with one
  ``<field>::<item>`` boolean marker per item so that "list contains"
  filters can be expressed as a ``where`` clause.

Chroma reports distances; they are converted to higher-is-better scores
according to the collection's distance function.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from embedvec.core.record_definition import DistanceFunction
from embedvec.core.settings import resolve_path
from embedvec.libs.vector_store.base_vector_store import BaseVectorStore

logger = logging.getLogger(__name__)

_JSON_PREFIX = "json:"
_MARKER_SEP = "::"
# Chroma rejects empty metadata dicts, so every record carries its id
_ID_KEY = "embedvec_id"

_HNSW_SPACE = {
    DistanceFunction.COSINE_SIMILARITY: "cosine",
    DistanceFunction.COSINE_DISTANCE: "cosine",
    DistanceFunction.DOT_PRODUCT: "ip",
    DistanceFunction.EUCLIDEAN_DISTANCE: "l2",
}


def encode_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded[key] = _JSON_PREFIX + json.dumps(list(value), ensure_ascii=False)
            for item in value:
                if isinstance(item, (str, int, float, bool)):
                    encoded[f"{key}{_MARKER_SEP}{item}"] = True
        elif isinstance(value, (str, int, float, bool)):
            encoded[key] = value
        else:
            encoded[key] = _JSON_PREFIX + json.dumps(value, ensure_ascii=False, default=str)
    return encoded


def decode_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    decoded: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        if _MARKER_SEP in key or key == _ID_KEY:
            continue
        if isinstance(value, str) and value.startswith(_JSON_PREFIX):
            decoded[key] = json.loads(value[len(_JSON_PREFIX):])
        else:
            decoded[key] = value
    return decoded


def build_where(filters: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Translate an equality filter into a Chroma ``where`` clause.

    Each key matches either a scalar field equal to the value or a list
    field containing it.
    """
    if not filters:
        return None
    clauses = []
    for key, value in filters.items():
        if isinstance(value, (str, int, float, bool)):
            clauses.append(
                {"$or": [{key: {"$eq": value}}, {f"{key}{_MARKER_SEP}{value}": {"$eq": True}}]}
            )
        else:
            raise ValueError(
                f"Filter value for '{key}' must be a scalar, got {type(value).__name__}"
            )
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaVectorStore(BaseVectorStore):
    """Vector store backed by a Chroma collection.

    Settings keys (``vector_store`` section): ``collection_name``,
    ``persist_directory`` (omit for an in-memory ephemeral client),
    ``distance_function`` and ``dimensions``.
    """

    def __init__(
        self,
        settings: Any = None,
        collection_name: Optional[str] = None,
        distance_function: Any = None,
        dimensions: Optional[int] = None,
        persist_directory: Optional[str] = None,
        client: Any = None,
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
        self.persist_directory = persist_directory or config.get("persist_directory")
        self._client = client if client is not None else self._create_client()
        self.collection = self._get_or_create_collection()

    def _create_client(self) -> Any:
        try:
            import chromadb
            from chromadb.config import Settings as ChromaSettings
        except ImportError as e:
            raise ImportError(
                "chromadb package is required for the chroma provider. "
                "Install it with: pip install chromadb"
            ) from e

        chroma_settings = ChromaSettings(anonymized_telemetry=False, allow_reset=True)
        if not self.persist_directory:
            return chromadb.EphemeralClient(settings=chroma_settings)

        persist_path = Path(resolve_path(self.persist_directory))
        persist_path.mkdir(parents=True, exist_ok=True)
        try:
            return chromadb.PersistentClient(path=str(persist_path), settings=chroma_settings)
        except Exception as e:
            raise RuntimeError(
                f"Failed to initialize ChromaDB client at '{persist_path}': {e}"
            ) from e

    def _get_or_create_collection(self) -> Any:
        return self._client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": _HNSW_SPACE[self.distance_function]},
        )

    def _score(self, distance: float) -> float:
        fn = self.distance_function
        if fn in (DistanceFunction.COSINE_SIMILARITY, DistanceFunction.DOT_PRODUCT):
            return 1.0 - distance
        if fn is DistanceFunction.EUCLIDEAN_DISTANCE:
            # Chroma's l2 space reports squared distances
            return -math.sqrt(max(distance, 0.0))
        return -distance

    def upsert(
        self,
        records: List[Dict[str, Any]],
        trace: Optional[Any] = None,
    ) -> List[str]:
        self.validate_records(records)
        ids = [str(r["id"]) for r in records]
        # Later duplicates in one batch win
        latest = {str(r["id"]): r for r in records}
        try:
            # Chroma upsert merges metadata; existing ids are deleted so records are replaced
            existing = self.collection.get(ids=list(latest), include=[])["ids"]
            if existing:
                self.collection.delete(ids=existing)
            self.collection.add(
                ids=list(latest),
                embeddings=[[float(v) for v in r["vector"]] for r in latest.values()],
                documents=[r.get("text") or "" for r in latest.values()],
                metadatas=[
                    {**encode_metadata(r.get("metadata") or {}), _ID_KEY: record_id}
                    for record_id, r in latest.items()
                ],
            )
        except Exception as e:
            raise RuntimeError(f"Chroma upsert into '{self.collection_name}' failed: {e}") from e

        if trace is not None:
            trace.record_stage(
                "vector_upsert",
                {"provider": "chroma", "collection": self.collection_name, "count": len(ids)},
            )
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
        total = self.collection.count()
        if total == 0:
            return []

        include = ["documents", "metadatas", "distances"]
        if include_vectors:
            include.append("embeddings")
        try:
            raw = self.collection.query(
                query_embeddings=[[float(v) for v in vector]],
                n_results=min(top_k, total),
                where=build_where(filters),
                include=include,
            )
        except Exception as e:
            raise RuntimeError(f"Chroma query on '{self.collection_name}' failed: {e}") from e

        ids = raw["ids"][0]
        documents = raw["documents"][0]
        metadatas = raw["metadatas"][0]
        distances = raw["distances"][0]
        embeddings = raw["embeddings"][0] if include_vectors else None

        results = []
        for i, record_id in enumerate(ids):
            result: Dict[str, Any] = {
                "id": record_id,
                "score": float(self._score(float(distances[i]))),
                "text": documents[i] or "",
                "metadata": decode_metadata(metadatas[i]),
            }
            if embeddings is not None:
                result["vector"] = [float(v) for v in embeddings[i]]
            results.append(result)

        if trace is not None:
            trace.record_stage(
                "vector_query",
                {
                    "provider": "chroma",
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
        include = ["documents", "metadatas"]
        if include_vectors:
            include.append("embeddings")
        try:
            raw = self.collection.get(ids=[str(i) for i in ids], include=include)
        except Exception as e:
            raise RuntimeError(f"Chroma get from '{self.collection_name}' failed: {e}") from e

        found: Dict[str, Dict[str, Any]] = {}
        for i, record_id in enumerate(raw["ids"]):
            record: Dict[str, Any] = {
                "id": record_id,
                "text": raw["documents"][i] or "",
                "metadata": decode_metadata(raw["metadatas"][i]),
            }
            if include_vectors:
                record["vector"] = [float(v) for v in raw["embeddings"][i]]
            found[record_id] = record
        return [found.get(str(record_id), {}) for record_id in ids]

    def delete(self, ids: List[str], trace: Optional[Any] = None) -> None:
        if not ids:
            raise ValueError("IDs list cannot be empty")
        try:
            self.collection.delete(ids=[str(i) for i in ids])
        except Exception as e:
            raise RuntimeError(f"Chroma delete from '{self.collection_name}' failed: {e}") from e

    def count(self) -> int:
        return int(self.collection.count())

    def clear(self) -> None:
        self._client.delete_collection(name=self.collection_name)
        self.collection = self._get_or_create_collection()
        logger.info("Cleared Chroma collection '%s'", self.collection_name)
