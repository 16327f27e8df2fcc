"""
Embedding generation for RAG ingestion and retrieval.

Providers:

- **API Provider**: OpenAI-compatible ``/v1/embeddings`` endpoints over aiohttp
- **Local Provider**: sentence-transformers models run in a worker thread

Every provider returns one slot per input text, ``None`` where a text could
not be embedded, so a single bad chunk never aborts a whole document.
``EmbeddingManager`` picks the provider from ``EmbeddingsConfig`` and is the
default ``EmbeddingClient`` used by the RAG module.
"""

from typing import List, Optional, Protocol, runtime_checkable

from .base import EmbeddingProvider, Vector
from .manager import EmbeddingManager


@runtime_checkable
class EmbeddingClient(Protocol):
    """Anything that can embed a batch of texts with per-slot failures."""

    async def embed(self, texts: List[str]) -> List[Optional[Vector]]:
        ...


__all__ = ["EmbeddingClient", "EmbeddingManager", "EmbeddingProvider", "Vector"]
