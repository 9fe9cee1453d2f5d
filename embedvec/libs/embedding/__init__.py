"""
Embedding Module.

This package contains embedding service abstractions and implementations:
- Base embedding class
- Embedding factory
- Provider implementations (OpenAI, Azure OpenAI, local hashing)

Importing the package registers the built-in providers with
:class:`EmbeddingFactory`.
"""

from embedvec.libs.embedding.base_embedding import BaseEmbedding, EmbeddingError
from embedvec.libs.embedding.embedding_factory import EmbeddingFactory
from embedvec.libs.embedding.hash_embedding import HashEmbedding
from embedvec.libs.embedding.openai_embedding import AzureOpenAIEmbedding, OpenAIEmbedding

EmbeddingFactory.register("openai", OpenAIEmbedding)
EmbeddingFactory.register("azure", AzureOpenAIEmbedding)
EmbeddingFactory.register("hash", HashEmbedding)

__all__ = [
    "AzureOpenAIEmbedding",
    "BaseEmbedding",
    "EmbeddingError",
    "EmbeddingFactory",
    "HashEmbedding",
    "OpenAIEmbedding",
]
