"""OpenAI and Azure OpenAI embedding implementations.

Both providers call the ``embeddings.create`` endpoint of the official
``openai`` SDK. Azure differs only in how the client is constructed.
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional

from embedvec.libs.embedding.base_embedding import BaseEmbedding, EmbeddingError

logger = logging.getLogger(__name__)


# Default output sizes of the hosted models
MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbedding(BaseEmbedding):
    """OpenAI Embedding provider implementation.

    Supports text-embedding-3-small, text-embedding-3-large and
    text-embedding-ada-002. The text-embedding-3 models accept a
    ``dimensions`` option that shortens their output vectors; it is not
    sent for other models.

    Attributes:
        model: The model identifier to use.
        dimensions: Optional reduced output size (text-embedding-3-* only).
        api_key: The API key for authentication.
        base_url: The base URL for the API.

    Example:
        >>> settings = load_settings("config/settings.yaml")
        >>> embedding = OpenAIEmbedding(settings)
        >>> vectors = embedding.embed(["Luxury hotel with a pool", "Budget hostel"])
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "text-embedding-3-small"
    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(
        self,
        settings: Any,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        """Initialize the provider.

        Args:
            settings: Application settings containing the ``embedding`` section.
            api_key: Optional API key override.
            base_url: Optional base URL override.
            client: Pre-built SDK client (used by tests).

        Raises:
            ValueError: If no API key is available and no client is given.
        """
        config = settings.embedding
        self.model = config.get("model") or self.DEFAULT_MODEL
        self.dimensions = config.get("dimensions")

        # API key: explicit > settings > env var
        self.api_key = api_key or config.get("api_key") or os.environ.get(self.API_KEY_ENV)
        if not self.api_key and client is None:
            raise ValueError(
                f"{self._label()} API key not provided. Set {self.API_KEY_ENV} "
                "environment variable or pass api_key parameter."
            )

        self.base_url = base_url or config.get("base_url") or self.DEFAULT_BASE_URL
        self._client = client

    def _label(self) -> str:
        return "OpenAI"

    def _build_client(self) -> Any:
        try:
            from openai import OpenAI
        except ImportError as e:
            raise RuntimeError(
                "OpenAI Python package not installed. Install with: pip install openai"
            ) from e
        return OpenAI(api_key=self.api_key, base_url=self.base_url)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _model_name(self) -> str:
        return self.model

    def embed(
        self,
        texts: List[str],
        trace: Optional[Any] = None,
        **kwargs: Any,
    ) -> List[List[float]]:
        """Generate embeddings for a batch of texts.

        Args:
            texts: Texts to embed. Must not be empty.
            trace: Optional TraceContext.
            **kwargs: Per-call overrides (``dimensions``).

        Returns:
            One vector per input text, in input order.

        Raises:
            ValueError: If texts list is empty or contains invalid entries.
            EmbeddingError: If the API call fails or the response is malformed.
        """
        self.validate_texts(texts)

        api_params: dict[str, Any] = {
            "input": texts,
            "model": self._model_name(),
        }
        dimensions = kwargs.get("dimensions", self.dimensions)
        if dimensions is not None and "text-embedding-3" in self.model.lower():
            api_params["dimensions"] = int(dimensions)

        try:
            response = self.client.embeddings.create(**api_params)
        except Exception as e:
            raise EmbeddingError(f"{self._label()} Embeddings API call failed: {e}") from e

        try:
            # The API may return items out of order; "index" is authoritative
            items = sorted(response.data, key=lambda item: getattr(item, "index", 0))
            embeddings = [list(item.embedding) for item in items]
        except (AttributeError, KeyError, TypeError) as e:
            raise EmbeddingError(
                f"Failed to parse {self._label()} Embeddings API response: {e}"
            ) from e

        if len(embeddings) != len(texts):
            raise EmbeddingError(
                f"Output length mismatch: expected {len(texts)}, got {len(embeddings)}"
            )

        if trace is not None:
            trace.record_stage(
                "embedding_call",
                {"provider": self._label().lower(), "model": self.model, "count": len(texts)},
            )
        logger.debug("Embedded %d texts with %s", len(texts), self.model)
        return embeddings

    def get_dimension(self) -> Optional[int]:
        """Configured dimensions, else the model's default, else None."""
        if self.dimensions is not None:
            return int(self.dimensions)
        return MODEL_DIMENSIONS.get(self.model)


class AzureOpenAIEmbedding(OpenAIEmbedding):
    """Azure OpenAI embedding provider.

    Settings keys: ``endpoint``, ``deployment_name`` (defaults to the
    model name) and ``api_version``. The key comes from
    ``AZURE_OPENAI_API_KEY`` unless configured explicitly.
    """

    API_KEY_ENV = "AZURE_OPENAI_API_KEY"
    DEFAULT_API_VERSION = "2024-02-01"

    def __init__(
        self,
        settings: Any,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        client: Any = None,
    ) -> None:
        config = settings.embedding
        self.endpoint = (
            endpoint or config.get("endpoint") or os.environ.get("AZURE_OPENAI_ENDPOINT")
        )
        if not self.endpoint and client is None:
            raise ValueError(
                "Azure OpenAI endpoint not provided. Set embedding.endpoint "
                "or AZURE_OPENAI_ENDPOINT."
            )
        self.api_version = config.get("api_version") or self.DEFAULT_API_VERSION
        super().__init__(settings, api_key=api_key, base_url=self.endpoint, client=client)
        self.deployment_name = config.get("deployment_name") or self.model

    def _label(self) -> str:
        return "Azure OpenAI"

    def _model_name(self) -> str:
        return self.deployment_name

    def _build_client(self) -> Any:
        try:
            from openai import AzureOpenAI
        except ImportError as e:
            raise RuntimeError(
                "OpenAI Python package not installed. Install with: pip install openai"
            ) from e
        return AzureOpenAI(
            api_key=self.api_key,
            azure_endpoint=self.endpoint,
            api_version=self.api_version,
        )
