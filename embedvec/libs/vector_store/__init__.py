"""
Vector Store Module.

This package contains vector store abstractions and implementations:
- Base vector store class
- Vector store factory
- Implementations (in-memory, Chroma)

Importing the package registers the built-in providers with
:class:`VectorStoreFactory`.
"""

from embedvec.libs.vector_store.base_vector_store import BaseVectorStore
from embedvec.libs.vector_store.chroma_store import ChromaVectorStore
from embedvec.libs.vector_store.memory_vector_store import InMemoryVectorStore
from embedvec.libs.vector_store.vector_store_factory import VectorStoreFactory

VectorStoreFactory.register_provider("memory", InMemoryVectorStore)
VectorStoreFactory.register_provider("chroma", ChromaVectorStore)

__all__ = [
    "BaseVectorStore",
    "ChromaVectorStore",
    "InMemoryVectorStore",
    "VectorStoreFactory",
]
