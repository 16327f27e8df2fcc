"""RAG domain models for Synaptic RAG."""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from .base import SynapticBaseModel

# Payload fields written for every chunk alongside the caller's metadata
CONTENT_FIELD = "content"
CHUNK_INDEX_FIELD = "chunkIndex"


class RetrievedChunk(SynapticBaseModel):
    """A chunk of context returned by similarity search."""

    content: str = Field(description="Chunk text")
    score: float = Field(description="Similarity score reported by the vector store")
    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Payload fields other than the content, or None when there are none",
    )


class RetrievalOptions(SynapticBaseModel):
    """Per-call overrides for context retrieval."""

    limit: Optional[int] = Field(default=None, ge=1, description="Maximum chunks to return")
    score_threshold: Optional[float] = Field(
        default=None,
        description="Minimum similarity score, applied by the vector store",
    )
    filter: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Payload fields that every result must match",
    )


class StoredPoint(SynapticBaseModel):
    """A persisted point as returned by metadata scans."""

    id: str = Field(description="Point identifier")
    content: Optional[str] = Field(default=None, description="Chunk text stored in the payload")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Full point payload")
    vector: Optional[Union[List[float], Dict[str, Any]]] = Field(
        default=None,
        description="Stored vector",
    )
