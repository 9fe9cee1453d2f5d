"""Factory for creating VectorStore provider instances.

Providers are selected by ``vector_store.provider`` in settings, so the
backend can be switched without code changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from embedvec.libs.vector_store.base_vector_store import BaseVectorStore

if TYPE_CHECKING:
    from embedvec.core.settings import Settings


class VectorStoreFactory:
    """Factory for creating VectorStore provider instances."""

    _registry: dict[str, type[BaseVectorStore]] = {}

    @classmethod
    def register_provider(cls, name: str, provider_class: type[BaseVectorStore]) -> None:
        """Register a VectorStore implementation under *name*.

        Raises:
            ValueError: If name is empty or provider_class doesn't inherit
                from BaseVectorStore.
        """
        if not isinstance(provider_class, type) or not issubclass(provider_class, BaseVectorStore):
            raise ValueError(
                f"Provider class {getattr(provider_class, '__name__', provider_class)} "
                "must inherit from BaseVectorStore"
            )
        normalized = name.strip().lower()
        if not normalized:
            raise ValueError("Provider name cannot be empty")
        cls._registry[normalized] = provider_class

    @classmethod
    def create(cls, settings: Settings, **override_kwargs: Any) -> BaseVectorStore:
        """Create a VectorStore instance based on configuration.

        Args:
            settings: Settings with a ``vector_store`` section.
            **override_kwargs: Constructor overrides (e.g. collection_name).

        Raises:
            ValueError: If the provider is missing or not registered.
            RuntimeError: If the provider fails to initialise.
        """
        provider_raw = settings.vector_store.get("provider")
        if not isinstance(provider_raw, str) or not provider_raw.strip():
            raise ValueError(
                "Missing required vector store provider: vector_store.provider"
            )

        provider_name = provider_raw.strip().lower()
        provider_class = cls._registry.get(provider_name)
        if provider_class is None:
            available = ", ".join(sorted(cls._registry)) or "<none>"
            raise ValueError(
                f"Unsupported vector_store.provider: '{provider_name}'. "
                f"Available providers: {available}"
            )

        try:
            return provider_class(settings=settings, **override_kwargs)
        except ValueError:
            raise
        except Exception as e:
            raise RuntimeError(
                f"Failed to instantiate VectorStore provider '{provider_name}': {e}"
            ) from e

    @classmethod
    def list_providers(cls) -> list[str]:
        return sorted(cls._registry)
