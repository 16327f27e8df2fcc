"""Configuration models for the RAG module and its collaborators."""

from enum import Enum
from typing import Callable, List, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from .base import FrozenModel

ChunkFunction = Callable[[str], List[str]]


class RAGProviderType(str, Enum):
    """Supported vector store backends."""

    QDRANT = "qdrant"


class DistanceMetric(str, Enum):
    """Distance metrics understood by Qdrant collections."""

    COSINE = "Cosine"
    EUCLID = "Euclid"
    DOT = "Dot"

    @classmethod
    def _missing_(cls, value):
        aliases = {
            "cosine": cls.COSINE,
            "euclid": cls.EUCLID,
            "euclidean": cls.EUCLID,
            "dot": cls.DOT,
            "dot_product": cls.DOT,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class QdrantConfig(FrozenModel):
    """Connection and collection settings for the Qdrant provider."""

    url: str = Field(description="Qdrant URL, or ':memory:' for local in-process mode")
    api_key: Optional[str] = Field(default=None, description="API key for secured instances")
    collection_name: Optional[str] = Field(default=None, description="Collection to use")
    vector_size: Optional[int] = Field(default=None, ge=1, description="Vector dimensionality")
    distance_metric: Optional[DistanceMetric] = Field(default=None, description="Vector distance metric")
    timeout: Optional[int] = Field(default=None, ge=1, description="Request timeout in seconds")
    scroll_page_size: int = Field(default=250, ge=1, description="Points fetched per scroll page")
    verify_collection: bool = Field(
        default=True,
        description="Check an existing collection's vector size and metric on initialize",
    )


class EmbeddingsConfig(FrozenModel):
    """Settings for the embedding client owned by the RAG module."""

    provider: Literal["api", "local"] = Field(default="local", description="Embedding backend")
    model: str = Field(default="all-MiniLM-L6-v2", description="Embedding model name")
    api_base: Optional[str] = Field(default=None, description="OpenAI-compatible API base URL")
    api_key: Optional[str] = Field(default=None, description="Embedding API key")
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout for the API provider")
    batch_size: Optional[int] = Field(default=None, ge=1, description="Texts per embedding request")


class ChunkingConfig(FrozenModel):
    """Fixed-window chunking parameters."""

    strategy: Literal["fixed"] = Field(default="fixed", description="Chunking strategy")
    chunk_size: int = Field(default=300, ge=1, description="Window length in characters")
    chunk_overlap: int = Field(default=50, ge=0, description="Characters shared by consecutive windows")

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class RAGConfig(FrozenModel):
    """Top-level configuration for :class:`synaptic_rag.core.module.RAGModule`.

    Provider-specific and embedding sections are optional at the model level so
    that the facade can report exactly which key is missing.
    """

    provider: Optional[RAGProviderType] = Field(default=None, description="Vector store backend")
    qdrant_config: Optional[QdrantConfig] = Field(default=None, description="Qdrant settings")
    embeddings_config: Optional[EmbeddingsConfig] = Field(default=None, description="Embedding settings")
    chunking_config: Optional[Union[ChunkingConfig, ChunkFunction]] = Field(
        default=None,
        description="Chunking parameters or a custom chunk function",
    )
    default_retrieval_limit: int = Field(default=5, ge=1, description="Chunks returned per query")
    default_score_threshold: Optional[float] = Field(
        default=None,
        description="Minimum similarity score for retrieved chunks",
    )
    debug: bool = Field(default=False, description="Verbose logging")

    @field_validator("default_retrieval_limit", mode="before")
    @classmethod
    def _default_limit(cls, value):
        return 5 if value is None else value
