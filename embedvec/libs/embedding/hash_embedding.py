"""Deterministic local embedding provider.

Uses the feature-hashing trick: each lower-cased word token is hashed with
SHA-256 into one of ``dimensions`` buckets with a sign derived from the same
digest, and the resulting vector is L2-normalised. Texts that share words
therefore have positive cosine similarity. No network access is needed,
which makes this provider suitable for tests, demos and offline builds.
"""

from __future__ import annotations

import hashlib
import math
import re
from typing import Any, List, Optional

from embedvec.libs.embedding.base_embedding import BaseEmbedding

_TOKEN_RE = re.compile(r"[a-z0-9]+")

DEFAULT_DIMENSIONS = 256


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(text.lower())


class HashEmbedding(BaseEmbedding):
    """Feature-hashing embedder.

    Args:
        settings: Optional settings; ``embedding.dimensions`` sets the size.
        dimensions: Explicit size, overriding settings.
    """

    def __init__(self, settings: Any = None, dimensions: Optional[int] = None) -> None:
        configured = None
        if settings is not None:
            configured = settings.embedding.get("dimensions")
        size = dimensions if dimensions is not None else (configured or DEFAULT_DIMENSIONS)
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"dimensions must be a positive integer, got {size}")
        self.dimensions = size

    def _embed_text(self, text: str) -> List[float]:
        vector = [0.0] * self.dimensions
        for token in tokenize(text):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self.dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0.0:
            return vector
        return [v / norm for v in vector]

    def embed(self, texts: List[str], trace: Optional[Any] = None) -> List[List[float]]:
        self.validate_texts(texts)
        vectors = [self._embed_text(text) for text in texts]
        if trace is not None:
            trace.record_stage(
                "embedding_call",
                {"provider": "hash", "dimensions": self.dimensions, "count": len(texts)},
            )
        return vectors

    def get_dimension(self) -> int:
        return self.dimensions
