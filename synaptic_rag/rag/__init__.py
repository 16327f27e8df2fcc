"""RAG (Retrieval-Augmented Generation) ingestion and retrieval pipeline."""

from .chunking import fixed_window_chunker, resolve_chunker
from .embeddings import EmbeddingClient, EmbeddingManager
from .providers import QdrantProvider, RAGProvider

__all__ = [
    "fixed_window_chunker",
    "resolve_chunker",
    "EmbeddingClient",
    "EmbeddingManager",
    "RAGProvider",
    "QdrantProvider",
]
