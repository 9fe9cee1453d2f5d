"""
Observability Layer.

Human-readable logging, JSON Lines formatting and trace persistence.
"""

__all__ = []
