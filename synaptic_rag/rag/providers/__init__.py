"""Vector store providers."""

from .base import RAGProvider
from .qdrant import QdrantProvider

__all__ = ["RAGProvider", "QdrantProvider"]
