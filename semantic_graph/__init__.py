"""Semantic Graph - embedding projection, clustering and cluster insights for the graph view."""

__version__ = "1.0.0"

__all__ = []
