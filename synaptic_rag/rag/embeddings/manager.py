"""Embedding manager that selects and drives a single provider."""

from typing import List, Optional

from ...config.logging import LoggerMixin
from ...core.exceptions import EmbeddingError
from ...models.config import EmbeddingsConfig
from .api import ApiEmbeddingProvider
from .base import EmbeddingProvider, Vector
from .local import LocalEmbeddingProvider


class EmbeddingManager(LoggerMixin):
    """Manages text embeddings for RAG functionality."""

    def __init__(self, config: EmbeddingsConfig):
        self.config = config
        self.provider: Optional[EmbeddingProvider] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the embedding manager with appropriate provider."""
        try:
            if self.config.provider == "api":
                self.provider = ApiEmbeddingProvider(self.config)
            else:
                self.provider = LocalEmbeddingProvider(self.config)

            await self.provider.initialize()
            self._initialized = True

            self.logger.info(
                "Embedding manager initialized",
                provider=self.provider.provider_name,
                model=self.config.model
            )

        except Exception as e:
            self.logger.error("Failed to initialize embedding manager", error=str(e))
            raise EmbeddingError(f"Embedding manager initialization failed: {e}") from e

    async def close(self) -> None:
        """Close the embedding manager."""
        if self.provider:
            await self.provider.close()
            self.provider = None

        self._initialized = False
        self.logger.info("Embedding manager closed")

    def _ensure_initialized(self) -> None:
        """Ensure the embedding manager is initialized."""
        if not self._initialized or not self.provider:
            raise EmbeddingError("Embedding manager not initialized")

    async def embed(self, texts: List[str]) -> List[Optional[Vector]]:
        """Embed a batch of texts; failed slots are None."""
        self._ensure_initialized()
        return await self.provider.embed_texts(texts)

    def get_embedding_dimension(self) -> int:
        """Get the dimension of embeddings produced by the model."""
        self._ensure_initialized()
        return self.provider.get_embedding_dimension()

