"""Environment-driven settings for Synaptic RAG."""

from typing import Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError
from ..models.config import (
    ChunkingConfig,
    EmbeddingsConfig,
    QdrantConfig,
    RAGConfig,
)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")

    # Vector store
    RAG_PROVIDER: str = Field(default="qdrant", description="Vector store backend")
    QDRANT_URL: str = Field(default="http://localhost:6333", description="Qdrant URL")
    QDRANT_API_KEY: Optional[str] = Field(default=None, description="Qdrant API key")
    QDRANT_COLLECTION_NAME: Optional[str] = Field(default=None, description="Qdrant collection name")
    QDRANT_VECTOR_SIZE: Optional[int] = Field(default=None, description="Vector dimensionality")
    QDRANT_DISTANCE_METRIC: str = Field(default="Cosine", description="Cosine, Euclid or Dot")
    QDRANT_TIMEOUT: Optional[int] = Field(default=None, description="Qdrant request timeout in seconds")

    # Embeddings
    EMBEDDING_PROVIDER: str = Field(default="local", description="Embedding provider: 'local' or 'api'")
    EMBEDDING_MODEL: str = Field(default="all-MiniLM-L6-v2", description="Embedding model name")
    EMBEDDING_API_BASE: Optional[str] = Field(
        default=None, description="Embedding API base URL (e.g., http://localhost:4000)"
    )
    EMBEDDING_API_KEY: Optional[str] = Field(default=None, description="Embedding API key")
    EMBEDDING_BATCH_SIZE: Optional[int] = Field(default=None, description="Texts per embedding request")

    # Chunking
    CHUNKING_STRATEGY: Optional[str] = Field(default=None, description="Chunking strategy, e.g. 'fixed'")
    CHUNK_SIZE: int = Field(default=300, description="Chunk window size in characters")
    CHUNK_OVERLAP: int = Field(default=50, description="Chunk overlap in characters")

    # Retrieval
    DEFAULT_RETRIEVAL_LIMIT: int = Field(default=5, description="Chunks returned per query")
    DEFAULT_SCORE_THRESHOLD: Optional[float] = Field(
        default=None, description="Minimum similarity score for retrieved chunks"
    )

    def to_rag_config(self) -> RAGConfig:
        """Assemble a RAGConfig from these settings.

        Values are passed through as-is; missing required keys are reported by
        the RAG module's own validation rather than here.
        """
        try:
            return self._build_rag_config()
        except PydanticValidationError as e:
            raise ConfigurationError.from_validation_error(e) from e

    def _build_rag_config(self) -> RAGConfig:
        chunking_config = None
        if self.CHUNKING_STRATEGY:
            chunking_config = ChunkingConfig(
                strategy=self.CHUNKING_STRATEGY,
                chunk_size=self.CHUNK_SIZE,
                chunk_overlap=self.CHUNK_OVERLAP,
            )

        return RAGConfig(
            provider=self.RAG_PROVIDER,
            qdrant_config=QdrantConfig(
                url=self.QDRANT_URL,
                api_key=self.QDRANT_API_KEY,
                collection_name=self.QDRANT_COLLECTION_NAME,
                vector_size=self.QDRANT_VECTOR_SIZE,
                distance_metric=self.QDRANT_DISTANCE_METRIC,
                timeout=self.QDRANT_TIMEOUT,
            ),
            embeddings_config=EmbeddingsConfig(
                provider=self.EMBEDDING_PROVIDER,
                model=self.EMBEDDING_MODEL,
                api_base=self.EMBEDDING_API_BASE,
                api_key=self.EMBEDDING_API_KEY,
                batch_size=self.EMBEDDING_BATCH_SIZE,
            ),
            chunking_config=chunking_config,
            default_retrieval_limit=self.DEFAULT_RETRIEVAL_LIMIT,
            default_score_threshold=self.DEFAULT_SCORE_THRESHOLD,
            debug=self.DEBUG,
        )

    def __repr__(self) -> str:
        """String representation of settings."""
        return (
            f"Settings(qdrant={self.QDRANT_URL}, "
            f"collection={self.QDRANT_COLLECTION_NAME}, debug={self.DEBUG})"
        )
