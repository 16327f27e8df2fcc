"""The RAG module facade: configuration validation, lifecycle and delegation."""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from qdrant_client import AsyncQdrantClient

from ..config.logging import LoggerMixin
from ..models.base import LifecycleState
from ..models.config import ChunkingConfig, RAGConfig, RAGProviderType
from ..models.rag import RetrievalOptions, RetrievedChunk, StoredPoint
from ..rag.chunking import resolve_chunker
from ..rag.embeddings import EmbeddingClient, EmbeddingManager
from ..rag.providers import QdrantProvider, RAGProvider
from .exceptions import ConfigurationError, InitializationError, NotReadyError, ValidationError

# Guards __init__ so instances only come out of RAGModule.create()
_CREATE_TOKEN = object()


def coerce_retrieval_options(options: Optional[Union[RetrievalOptions, Mapping]]) -> RetrievalOptions:
    """Accept options as a model or a plain mapping, reporting bad input as ValidationError."""
    if options is None:
        return RetrievalOptions()
    if isinstance(options, RetrievalOptions):
        return options
    try:
        return RetrievalOptions.model_validate(dict(options))
    except PydanticValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(f"Invalid retrieval options: {first.get('msg', e)}", field) from e


class RAGModule(LoggerMixin):
    """Backend-independent entry point for document ingestion and retrieval.

    Construction is two-phase. The constructor only validates and stores the
    configuration, so configuration mistakes surface before any network call;
    :meth:`create` then performs the I/O (embedding client setup, collection
    check) and returns a ready instance::

        rag = await RAGModule.create(config)
        ids = await rag.add_document(text, {"source": "a.txt"})
        chunks = await rag.retrieve_context("question", RetrievalOptions(limit=3))
    """

    def __init__(self, config: Union[RAGConfig, Mapping], *, _token: Any = None):
        if _token is not _CREATE_TOKEN:
            raise TypeError("RAGModule instances must be created with 'await RAGModule.create(config)'")

        self.config = self.validate_config(config)
        self._state = LifecycleState.UNINITIALIZED
        self._provider: Optional[RAGProvider] = None
        self._embedding_manager: Optional[EmbeddingManager] = None
        self._owns_client = True

        if self.config.debug:
            self.logger.debug("RAG module configuration", **self._describe_config())

    @staticmethod
    def validate_config(config: Union[RAGConfig, Mapping]) -> RAGConfig:
        """Check every required setting without touching the network."""
        if isinstance(config, Mapping):
            try:
                config = RAGConfig.model_validate(dict(config))
            except PydanticValidationError as e:
                raise ConfigurationError.from_validation_error(e) from e
        elif not isinstance(config, RAGConfig):
            raise ConfigurationError("RAG configuration must be a RAGConfig or a mapping")

        if config.provider is None:
            raise ConfigurationError("RAG provider type must be specified in config", "provider")

        if config.provider is RAGProviderType.QDRANT:
            qdrant = config.qdrant_config
            if qdrant is None:
                raise ConfigurationError(
                    "qdrant_config must be provided when provider is qdrant", "qdrant_config"
                )
            if not qdrant.url:
                raise ConfigurationError("qdrant_config.url must be specified", "qdrant_config.url")
            if not qdrant.collection_name:
                raise ConfigurationError(
                    "qdrant_config.collection_name must be specified", "qdrant_config.collection_name"
                )
            if qdrant.vector_size is None:
                raise ConfigurationError(
                    "qdrant_config.vector_size must be specified", "qdrant_config.vector_size"
                )
            if qdrant.distance_metric is None:
                raise ConfigurationError(
                    "qdrant_config.distance_metric must be specified", "qdrant_config.distance_metric"
                )

        if config.embeddings_config is None:
            raise ConfigurationError(
                "embeddings_config must be provided to handle internal embedding generation",
                "embeddings_config",
            )

        return config

    @classmethod
    async def create(
        cls,
        config: Union[RAGConfig, Mapping],
        *,
        embeddings: Optional[EmbeddingClient] = None,
        client: Optional[AsyncQdrantClient] = None,
    ) -> "RAGModule":
        """Validate the configuration, then initialize and return a ready module.

        ``embeddings`` replaces the embedding manager built from
        ``embeddings_config`` and ``client`` replaces the Qdrant client built
        from ``qdrant_config``; injected collaborators are not closed by
        :meth:`close`.
        """
        module = cls(config, _token=_CREATE_TOKEN)
        await module._initialize(embeddings, client)
        return module

    async def _initialize(
        self,
        embeddings: Optional[EmbeddingClient],
        client: Optional[AsyncQdrantClient],
    ) -> None:
        if self._state is LifecycleState.READY:
            self.logger.warning("RAG module is already initialized")
            return

        self._state = LifecycleState.INITIALIZING
        self._owns_client = client is None
        self.logger.info("Initializing RAG module", provider=self.config.provider.value)

        try:
            if embeddings is None:
                self._embedding_manager = EmbeddingManager(self.config.embeddings_config)
                await self._embedding_manager.initialize()
                embeddings = self._embedding_manager
                self.logger.info("Embedding manager ready", provider=self.config.embeddings_config.provider)
                self._check_embedding_dimension(self._embedding_manager)

            provider = self._build_provider(embeddings, client)
            self._provider = provider
            await provider.initialize()
            self.logger.info("RAG provider initialized", provider=self.config.provider.value)

        except Exception as e:
            self.logger.error("Failed to initialize RAG module", error=str(e))
            await self._release()
            self._state = LifecycleState.UNINITIALIZED
            if isinstance(e, InitializationError):
                raise
            raise InitializationError(f"RAG module initialization failed: {e}", "rag_module") from e

        self._state = LifecycleState.READY
        self.logger.info("RAG module initialized")

    def _check_embedding_dimension(self, manager: EmbeddingManager) -> None:
        """The embedding model must produce vectors of the collection's size."""
        dimension = manager.get_embedding_dimension()
        expected = self.config.qdrant_config.vector_size
        if dimension != expected:
            raise InitializationError(
                f"Embedding model '{self.config.embeddings_config.model}' produces {dimension}-dimensional "
                f"vectors, qdrant_config.vector_size is {expected}",
                "embeddings",
            )

    def _build_provider(
        self,
        embeddings: EmbeddingClient,
        client: Optional[AsyncQdrantClient],
    ) -> RAGProvider:
        chunker = resolve_chunker(self.config.chunking_config)

        if self.config.provider is RAGProviderType.QDRANT:
            return QdrantProvider(
                self.config.qdrant_config,
                embeddings,
                chunker=chunker,
                client=client,
                debug=self.config.debug,
            )

        raise ConfigurationError(f"Unsupported RAG provider: {self.config.provider}", "provider")

    async def _release(self) -> None:
        """Close the collaborators this module created itself."""
        if self._provider is not None and self._owns_client:
            await self._provider.close()
        if self._embedding_manager is not None:
            await self._embedding_manager.close()
        self._provider = None
        self._embedding_manager = None

    async def close(self) -> None:
        """Release connections. The module cannot be used afterwards."""
        if self._state is LifecycleState.CLOSED:
            return
        await self._release()
        self._state = LifecycleState.CLOSED
        self.logger.info("RAG module closed")

    async def __aenter__(self) -> "RAGModule":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is LifecycleState.READY

    def _ensure_ready(self) -> RAGProvider:
        if not self.is_ready or self._provider is None:
            raise NotReadyError("RAGModule")
        return self._provider

    def _describe_config(self) -> Dict[str, Any]:
        """Configuration summary for debug logs, without credentials."""
        qdrant = self.config.qdrant_config
        chunking = self.config.chunking_config
        if chunking is None:
            chunking_desc = "default"
        elif isinstance(chunking, ChunkingConfig):
            chunking_desc = f"{chunking.strategy}({chunking.chunk_size}/{chunking.chunk_overlap})"
        else:
            chunking_desc = "custom"
        return {
            "provider": self.config.provider.value,
            "url": qdrant.url if qdrant else None,
            "collection": qdrant.collection_name if qdrant else None,
            "vector_size": qdrant.vector_size if qdrant else None,
            "embeddings": self.config.embeddings_config.provider,
            "chunking": chunking_desc,
            "default_retrieval_limit": self.config.default_retrieval_limit,
            "default_score_threshold": self.config.default_score_threshold,
        }

    async def add_document(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[str]:
        """Chunk, embed and store a document. Returns the ids of stored chunks."""
        provider = self._ensure_ready()
        self.logger.debug("Adding document", length=len(content), metadata=metadata)
        return await provider.add_document(content, metadata)

    async def retrieve_context(
        self,
        query_text: str,
        options: Optional[Union[RetrievalOptions, Mapping]] = None,
    ) -> List[RetrievedChunk]:
        """Retrieve the chunks most similar to ``query_text``.

        Per-call ``limit`` and ``score_threshold`` override the configured
        defaults for this call only.
        """
        provider = self._ensure_ready()
        options = coerce_retrieval_options(options)

        final_options = RetrievalOptions(
            limit=options.limit if options.limit is not None else self.config.default_retrieval_limit,
            score_threshold=(
                options.score_threshold
                if options.score_threshold is not None
                else self.config.default_score_threshold
            ),
            filter=options.filter,
        )
        self.logger.debug("Retrieving context", query=query_text[:50], limit=final_options.limit)

        results = await provider.retrieve_context(query_text, final_options)
        self.logger.debug("Context retrieved", results=len(results))
        return results

    async def delete_documents_by_ids(self, ids: List[str]) -> None:
        """Delete stored chunks by id."""
        provider = self._ensure_ready()
        self.logger.debug("Deleting documents by id", count=len(ids))
        await provider.delete_documents_by_ids(ids)

    async def delete_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> None:
        """Delete stored chunks whose payload matches every key/value pair."""
        provider = self._ensure_ready()
        self.logger.debug("Deleting documents by metadata", filter=filter_dict)
        await provider.delete_documents_by_metadata(filter_dict)

    async def get_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> List[StoredPoint]:
        """Return every stored chunk whose payload matches every key/value pair."""
        provider = self._ensure_ready()
        return await provider.get_documents_by_metadata(filter_dict)

    async def delete_storage(self) -> None:
        """Drop the whole collection behind this module. Use with caution."""
        provider = self._ensure_ready()
        self.logger.warning("Deleting the underlying storage for this RAG module")
        await provider.delete_storage()
