"""Qdrant provider with collection lifecycle management and coordination."""

import re
from typing import Any, Dict, List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import UnexpectedResponse
from qdrant_client.models import Distance, VectorParams

from ....config.logging import LoggerMixin
from ....core.exceptions import BackendOperationError, InitializationError, NotReadyError
from ....models.base import LifecycleState
from ....models.config import ChunkFunction, QdrantConfig
from ....models.rag import RetrievalOptions, RetrievedChunk, StoredPoint
from ...chunking import fixed_window_chunker
from ...embeddings import EmbeddingClient
from ..base import RAGProvider
from .documents import DocumentOperations
from .search import SearchOperations

MEMORY_LOCATION = ":memory:"
_NOT_FOUND = re.compile(r"not\s*found|doesn't exist|does not exist", re.IGNORECASE)


def build_client(config: QdrantConfig) -> AsyncQdrantClient:
    """Create an async Qdrant client from connection settings."""
    if config.url == MEMORY_LOCATION:
        return AsyncQdrantClient(location=MEMORY_LOCATION)

    kwargs: Dict[str, Any] = {"url": config.url, "api_key": config.api_key}
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    return AsyncQdrantClient(**kwargs)


def is_not_found(error: Exception) -> bool:
    """Whether a client error means the target does not exist.

    HTTP responses are judged by status code alone; the message is only
    consulted for errors without one, such as local mode's ValueError.
    """
    if isinstance(error, UnexpectedResponse):
        return error.status_code == 404
    return bool(_NOT_FOUND.search(str(error)))


class QdrantProvider(RAGProvider, LoggerMixin):
    """RAG provider storing chunk embeddings in a single Qdrant collection."""

    def __init__(
        self,
        config: QdrantConfig,
        embeddings: EmbeddingClient,
        chunker: Optional[ChunkFunction] = None,
        client: Optional[AsyncQdrantClient] = None,
        debug: bool = False,
    ):
        self.config = config
        self.collection_name = config.collection_name
        self.embeddings = embeddings
        self.chunker = chunker or fixed_window_chunker
        self.client = client if client is not None else build_client(config)
        self.debug = debug
        self._state = LifecycleState.UNINITIALIZED

        self._documents = DocumentOperations(
            self.client,
            self.collection_name,
            self.embeddings,
            self.chunker,
            config.scroll_page_size,
            self.logger,
        )
        self._search = SearchOperations(
            self.client, self.collection_name, self.embeddings, self.logger
        )

        if self.debug:
            self.logger.debug(
                "Qdrant provider configured",
                url=config.url,
                collection=self.collection_name,
                vector_size=config.vector_size,
                distance=config.distance_metric.value if config.distance_metric else None,
            )

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is LifecycleState.READY

    async def initialize(self) -> None:
        """Make sure the configured collection exists and matches the configuration."""
        if self.is_ready:
            self.logger.info("Qdrant provider already initialized", collection=self.collection_name)
            return

        self._state = LifecycleState.INITIALIZING
        try:
            self.logger.info("Checking for Qdrant collection", collection=self.collection_name)
            response = await self.client.get_collections()
            exists = any(col.name == self.collection_name for col in response.collections)

            if not exists:
                self.logger.warning("Collection not found, creating it", collection=self.collection_name)
                await self.client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(
                        size=self.config.vector_size,
                        distance=Distance(self.config.distance_metric.value),
                    ),
                )
                self.logger.info("Collection created", collection=self.collection_name)
            else:
                self.logger.info("Collection exists", collection=self.collection_name)
                if self.config.verify_collection:
                    await self._verify_collection()

        except InitializationError:
            self._state = LifecycleState.UNINITIALIZED
            raise
        except Exception as e:
            self._state = LifecycleState.UNINITIALIZED
            self.logger.error("Qdrant initialization failed", collection=self.collection_name, error=str(e))
            raise InitializationError(f"Qdrant initialization failed: {e}", "qdrant") from e

        self._state = LifecycleState.READY

    async def _verify_collection(self) -> None:
        """Compare an existing collection's vector params with the configuration."""
        info = await self.client.get_collection(collection_name=self.collection_name)
        params = info.config.params.vectors

        if not isinstance(params, VectorParams):
            raise InitializationError(
                f"Collection '{self.collection_name}' uses named vectors, expected a single unnamed vector",
                "qdrant",
            )

        expected_distance = Distance(self.config.distance_metric.value)
        if params.size != self.config.vector_size or params.distance != expected_distance:
            raise InitializationError(
                f"Collection '{self.collection_name}' has vector size {params.size} and distance "
                f"{params.distance.value}, configuration expects {self.config.vector_size} and "
                f"{expected_distance.value}",
                "qdrant",
            )

    async def close(self) -> None:
        """Close the Qdrant client."""
        await self.client.close()
        self.logger.info("Qdrant provider closed", collection=self.collection_name)

    def _ensure_ready(self) -> None:
        if not self.is_ready:
            raise NotReadyError("QdrantProvider")

    # Document operations - delegated to DocumentOperations
    async def add_document(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[str]:
        self._ensure_ready()
        return await self._documents.add_document(content, metadata)

    async def get_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> List[StoredPoint]:
        self._ensure_ready()
        return await self._documents.get_documents_by_metadata(filter_dict)

    async def delete_documents_by_ids(self, ids: List[str]) -> None:
        self._ensure_ready()
        await self._documents.delete_documents_by_ids(ids)

    async def delete_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> None:
        self._ensure_ready()
        await self._documents.delete_documents_by_metadata(filter_dict)

    # Search operations - delegated to SearchOperations
    async def retrieve_context(
        self,
        query_text: str,
        options: Optional[RetrievalOptions] = None,
    ) -> List[RetrievedChunk]:
        self._ensure_ready()
        if self.debug:
            self.logger.debug(
                "Retrieving context",
                query=query_text[:50],
                options=options.model_dump() if options else None,
            )
        return await self._search.retrieve_context(query_text, options)

    async def delete_storage(self) -> None:
        """Drop the collection. A collection that is already gone counts as deleted."""
        self._ensure_ready()
        self.logger.warning("Deleting Qdrant collection", collection=self.collection_name)
        try:
            deleted = await self.client.delete_collection(collection_name=self.collection_name)
        except Exception as e:
            if is_not_found(e):
                self.logger.warning("Collection was not found during deletion", collection=self.collection_name)
                return
            self.logger.error("Failed to delete collection", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant collection deletion failed: {e}", "delete_collection", self.collection_name
            ) from e

        if deleted:
            self.logger.info("Collection deleted", collection=self.collection_name)
        else:
            self.logger.warning("Collection deletion returned false, it may not have existed", collection=self.collection_name)
