"""API-based embedding provider implementation."""

from typing import List, Optional

import aiohttp

from ...core.exceptions import EmbeddingError
from .base import EmbeddingProvider, Vector

class ApiEmbeddingProvider(EmbeddingProvider):
    """Embedding provider for OpenAI-compatible ``/v1/embeddings`` endpoints."""

    def __init__(self, config):
        super().__init__(config)
        self._session: Optional[aiohttp.ClientSession] = None
        self._dimension: Optional[int] = None

    @property
    def provider_name(self) -> str:
        return "api"

    async def initialize(self) -> None:
        """Initialize API-based embedding provider."""
        if not self.config.api_base:
            raise EmbeddingError("api_base required for API embedding provider")

        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)

        try:
            await self._test_api_connection()
            self._initialized = True

            self.logger.info(
                "API embedding provider initialized",
                api_base=self.config.api_base,
                model=self.config.model,
                dimension=self._dimension,
            )
        except Exception as e:
            if self._session:
                await self._session.close()
                self._session = None
            raise EmbeddingError(f"API embedding provider initialization failed: {e}") from e

    async def close(self) -> None:
        """Close the API embedding provider."""
        if self._session:
            await self._session.close()
            self._session = None

        self._initialized = False
        self.logger.info("API embedding provider closed")

    async def _test_api_connection(self) -> None:
        """Probe the endpoint and remember the dimension it reports."""
        vectors = await self._api_embed_texts(["test"])
        if not vectors or vectors[0] is None:
            raise EmbeddingError("API connection test returned no embedding")
        self._dimension = len(vectors[0])

    async def _embed_batch(self, texts: List[str]) -> List[Optional[Vector]]:
        return await self._api_embed_texts(texts)

    async def _api_embed_texts(self, texts: List[str]) -> List[Optional[Vector]]:
        """Call the embeddings endpoint, aligning results by their ``index`` field."""
        if not self._session:
            raise EmbeddingError("HTTP session not initialized")

        headers = {
            "Content-Type": "application/json"
        }

        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        payload = {
            "model": self.config.model,
            "input": texts
        }

        url = f"{self.config.api_base.rstrip('/')}/v1/embeddings"

        try:
            async with self._session.post(url, headers=headers, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise EmbeddingError(f"API request failed: {response.status} - {error_text}")
                data = await response.json()
        except aiohttp.ClientError as e:
            raise EmbeddingError(f"API request error: {e}") from e

        vectors: List[Optional[Vector]] = [None] * len(texts)
        for position, item in enumerate(data.get("data", [])):
            index = item.get("index", position)
            if 0 <= index < len(texts):
                vectors[index] = item.get("embedding")
        return vectors

    def get_embedding_dimension(self) -> int:
        """Get the dimension of embeddings produced by the API model."""
        self._ensure_initialized()
        if not self._dimension:
            raise EmbeddingError("Embedding dimension unknown until the API probe succeeds")
        return self._dimension

