"""
Libs Layer - Pluggable abstraction layer.

This package contains the factory pattern implementations for
pluggable components:
- Embedding services
- Vector stores
"""

__all__ = []
