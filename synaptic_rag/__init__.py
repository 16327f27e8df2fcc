"""
Synaptic RAG - document ingestion and retrieval over a Qdrant vector store.

This package provides:
- A fixed-window chunker with a pluggable chunk-function escape hatch
- Batch embedding with per-chunk failure tolerance (API or local models)
- A Qdrant provider for upserts, similarity search and metadata bulk operations
- The ``RAGModule`` facade with eager configuration validation
"""

__version__ = "0.1.0"
__author__ = "Synaptic RAG Team"

from .core.module import RAGModule
from .config.settings import Settings
from .models import (
    ChunkingConfig,
    DistanceMetric,
    EmbeddingsConfig,
    QdrantConfig,
    RAGConfig,
    RetrievalOptions,
    RetrievedChunk,
    StoredPoint,
)

__all__ = [
    "RAGModule",
    "Settings",
    "RAGConfig",
    "QdrantConfig",
    "EmbeddingsConfig",
    "ChunkingConfig",
    "DistanceMetric",
    "RetrievalOptions",
    "RetrievedChunk",
    "StoredPoint",
]
