"""Abstract base classes for embedding providers."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import numpy as np

from ...config.logging import LoggerMixin
from ...core.exceptions import EmbeddingError
from ...models.config import EmbeddingsConfig

Vector = List[float]


def to_vector(raw: Any) -> Optional[Vector]:
    """Coerce a provider output to a list of floats, or None if it is unusable."""
    if raw is None:
        return None
    array = np.asarray(raw, dtype=float).ravel()
    if array.size == 0 or not np.isfinite(array).all():
        return None
    return array.tolist()


class EmbeddingProvider(ABC, LoggerMixin):
    """Abstract base class for embedding providers.

    ``embed_texts`` returns one slot per input text. A slot is ``None`` when that
    text could not be embedded, so callers can keep chunks and vectors aligned
    by index.
    """

    def __init__(self, config: EmbeddingsConfig):
        self.config = config
        self._initialized = False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the embedding provider."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the embedding provider and clean up resources."""
        pass

    @abstractmethod
    async def _embed_batch(self, texts: List[str]) -> List[Optional[Vector]]:
        """Embed one request's worth of non-blank texts, aligned with the input."""
        pass

    @abstractmethod
    def get_embedding_dimension(self) -> int:
        """Get the dimension of embeddings produced by this provider."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of this provider."""
        pass

    def _ensure_initialized(self) -> None:
        """Ensure the provider is initialized."""
        if not self._initialized:
            raise EmbeddingError(f"{self.provider_name} provider not initialized")

    def _batches(self, indexed: Sequence[tuple]) -> List[Sequence[tuple]]:
        size = self.config.batch_size or len(indexed)
        return [indexed[i:i + size] for i in range(0, len(indexed), size)]

    async def embed_texts(self, texts: List[str]) -> List[Optional[Vector]]:
        """Generate embeddings for multiple texts."""
        self._ensure_initialized()

        results: List[Optional[Vector]] = [None] * len(texts)
        if not texts:
            return results

        indexed = [(i, text) for i, text in enumerate(texts) if text and text.strip()]
        if len(indexed) < len(texts):
            self.logger.warning("Blank texts will not be embedded", skipped=len(texts) - len(indexed))
        if not indexed:
            return results

        batches = self._batches(indexed)
        failed_batches = 0
        for batch in batches:
            try:
                vectors = await self._embed_batch([text for _, text in batch])
            except Exception as e:
                failed_batches += 1
                self.logger.warning(
                    "Embedding batch failed",
                    provider=self.provider_name,
                    batch_size=len(batch),
                    error=str(e),
                )
                if failed_batches == len(batches):
                    raise EmbeddingError(f"Failed to embed texts via {self.provider_name}: {e}") from e
                continue

            for (index, _), vector in zip(batch, vectors):
                results[index] = to_vector(vector)

        self.logger.debug(
            "Texts embedded",
            provider=self.provider_name,
            requested=len(texts),
            embedded=sum(1 for vector in results if vector is not None),
        )
        return results

