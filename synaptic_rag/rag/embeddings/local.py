"""Local sentence-transformers embedding provider implementation."""

import asyncio
from typing import List, Optional

from ...core.exceptions import EmbeddingError
from .base import EmbeddingProvider, Vector


class LocalEmbeddingProvider(EmbeddingProvider):
    """Local sentence-transformers embedding provider."""

    def __init__(self, config):
        super().__init__(config)
        self.model = None

    @property
    def provider_name(self) -> str:
        return "local"

    async def initialize(self) -> None:
        """Initialize local sentence-transformers model."""
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as e:
            raise EmbeddingError(
                "sentence-transformers not available. Install with: pip install sentence-transformers"
            ) from e

        try:
            # Load model in a thread pool to avoid blocking
            loop = asyncio.get_running_loop()
            self.model = await loop.run_in_executor(
                None,
                lambda: SentenceTransformer(self.config.model)
            )

            self._initialized = True

            self.logger.info(
                "Local embedding provider initialized",
                model=self.config.model,
                dimensions=self.model.get_sentence_embedding_dimension()
            )

        except Exception as e:
            self.logger.error("Failed to initialize local embedding provider", error=str(e))
            raise EmbeddingError(f"Local embedding provider initialization failed: {e}") from e

    async def close(self) -> None:
        """Close the local embedding provider."""
        self.model = None
        self._initialized = False
        self.logger.info("Local embedding provider closed")

    async def _embed_batch(self, texts: List[str]) -> List[Optional[Vector]]:
        """Generate embeddings using local model."""
        if not self.model:
            raise EmbeddingError("Local model not initialized")

        # Generate embeddings in thread pool
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: [emb.tolist() for emb in self.model.encode(texts, convert_to_tensor=False)]
        )

    def get_embedding_dimension(self) -> int:
        """Get the dimension of embeddings produced by the local model."""
        self._ensure_initialized()

        try:
            return self.model.get_sentence_embedding_dimension()
        except Exception as e:
            self.logger.error("Failed to get local embedding dimension", error=str(e))
            raise EmbeddingError(f"Failed to get embedding dimension: {e}") from e

