"""Synaptic RAG domain models."""

from .base import FrozenModel, LifecycleState, SynapticBaseModel
from .config import (
    ChunkFunction,
    ChunkingConfig,
    DistanceMetric,
    EmbeddingsConfig,
    QdrantConfig,
    RAGConfig,
    RAGProviderType,
)
from .rag import (
    CHUNK_INDEX_FIELD,
    CONTENT_FIELD,
    RetrievalOptions,
    RetrievedChunk,
    StoredPoint,
)

__all__ = [
    # Base models
    "SynapticBaseModel",
    "FrozenModel",
    "LifecycleState",

    # Configuration models
    "RAGConfig",
    "RAGProviderType",
    "QdrantConfig",
    "DistanceMetric",
    "EmbeddingsConfig",
    "ChunkingConfig",
    "ChunkFunction",

    # RAG models
    "RetrievedChunk",
    "RetrievalOptions",
    "StoredPoint",
    "CONTENT_FIELD",
    "CHUNK_INDEX_FIELD",
]
