"""Pytest configuration and shared fixtures for Synaptic RAG tests."""

from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, VectorParams

from synaptic_rag.models.config import (
    DistanceMetric,
    EmbeddingsConfig,
    QdrantConfig,
    RAGConfig,
)
from synaptic_rag.rag.providers.qdrant import QdrantProvider
from tests.utils import VECTOR_SIZE, HashEmbedder, make_collections_response


@pytest.fixture
def qdrant_config() -> QdrantConfig:
    """Qdrant settings for a small test collection."""
    return QdrantConfig(
        url="http://localhost:6333",
        collection_name="test_documents",
        vector_size=VECTOR_SIZE,
        distance_metric=DistanceMetric.COSINE,
    )


@pytest.fixture
def memory_qdrant_config() -> QdrantConfig:
    """Qdrant settings for local in-process mode."""
    return QdrantConfig(
        url=":memory:",
        collection_name="test_documents",
        vector_size=VECTOR_SIZE,
        distance_metric=DistanceMetric.COSINE,
        scroll_page_size=2,
    )


@pytest.fixture
def rag_config(qdrant_config: QdrantConfig) -> RAGConfig:
    """Complete RAG configuration."""
    return RAGConfig(
        provider="qdrant",
        qdrant_config=qdrant_config,
        embeddings_config=EmbeddingsConfig(provider="local", model="test-model"),
    )


@pytest.fixture
def embedder() -> HashEmbedder:
    """Deterministic embedding client."""
    return HashEmbedder()


@pytest.fixture
def mock_qdrant_client() -> AsyncMock:
    """Mock AsyncQdrantClient whose collection already exists."""
    client = AsyncMock(spec=AsyncQdrantClient)
    client.get_collections.return_value = make_collections_response("test_documents")
    client.get_collection.return_value = SimpleNamespace(
        config=SimpleNamespace(
            params=SimpleNamespace(vectors=VectorParams(size=VECTOR_SIZE, distance=Distance.COSINE))
        )
    )
    client.upsert.return_value = MagicMock()
    client.delete.return_value = MagicMock()
    client.delete_collection.return_value = True
    client.scroll.return_value = ([], None)
    client.query_points.return_value = SimpleNamespace(points=[])
    return client


@pytest_asyncio.fixture
async def ready_provider(
    qdrant_config: QdrantConfig,
    embedder: HashEmbedder,
    mock_qdrant_client: AsyncMock,
) -> QdrantProvider:
    """Initialized provider over a mocked client, skipping collection checks."""
    config = qdrant_config.model_copy(update={"verify_collection": False})
    provider = QdrantProvider(config, embedder, client=mock_qdrant_client)
    await provider.initialize()
    return provider


@pytest_asyncio.fixture
async def memory_client() -> AsyncGenerator[AsyncQdrantClient, None]:
    """Qdrant local-mode client living for a single test."""
    client = AsyncQdrantClient(location=":memory:")
    yield client
    await client.close()
