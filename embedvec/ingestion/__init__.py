"""
Ingestion Layer.

Embedding generation on upsert, hotel loading and hotel upserting.
"""

__all__ = []
