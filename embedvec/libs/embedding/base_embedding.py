"""Base abstraction for embedding providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class EmbeddingError(RuntimeError):
    """Raised when an embedding provider call fails."""


class BaseEmbedding(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed(self, texts: list[str], trace: Any | None = None) -> list[list[float]]:
        """Embed a batch of texts into dense vectors.

        Args:
            texts: Batch of input strings.
            trace: Optional trace context object.

        Returns:
            Dense vectors aligned with `texts` order.
        """

    def embed_one(self, text: str, trace: Any | None = None) -> list[float]:
        """Embed a single text."""
        return self.embed([text], trace=trace)[0]

    def get_dimension(self) -> int | None:
        """Return the vector size this provider produces, if known."""
        return None

    @staticmethod
    def validate_texts(texts: list[str]) -> None:
        """Reject empty batches and non-string or blank entries.

        Raises:
            ValueError: On the first invalid entry.
        """
        if not texts:
            raise ValueError("Texts list cannot be empty")
        for i, text in enumerate(texts):
            if not isinstance(text, str):
                raise ValueError(
                    f"Text at index {i} is not a string (type: {type(text).__name__})"
                )
            if not text.strip():
                raise ValueError(f"Text at index {i} is empty or whitespace-only")
