"""
Core Layer - Core business logic.

This package contains the core business logic including:
- Configuration management (settings.py)
- Record types and collection schema
- Vector search service
- Trace collection
"""

__all__ = []
