"""embedvec - embedding generation for vector store collections."""

__version__ = "0.1.0"
