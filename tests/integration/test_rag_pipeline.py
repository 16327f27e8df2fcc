"""End-to-end tests against Qdrant's in-process local mode."""

import pytest
import pytest_asyncio
from qdrant_client.models import Distance, VectorParams

from synaptic_rag.core.exceptions import InitializationError
from synaptic_rag.core.module import RAGModule
from synaptic_rag.models.config import ChunkingConfig, RAGConfig
from synaptic_rag.models.rag import RetrievalOptions
from synaptic_rag.rag.providers.qdrant import QdrantProvider
from tests.utils import HashEmbedder

DOCUMENTS = {
    "a.txt": "UBC is a public research university.",
    "b.txt": "Vancouver is a coastal city in British Columbia.",
    "c.txt": "Qdrant stores vectors with payloads for similarity search.",
    "d.txt": "The university campus sits next to Pacific Spirit Park.",
}


@pytest.fixture
def memory_rag_config(rag_config: RAGConfig, memory_qdrant_config) -> RAGConfig:
    return rag_config.model_copy(update={"qdrant_config": memory_qdrant_config})


@pytest_asyncio.fixture
async def rag(memory_rag_config, embedder):
    module = await RAGModule.create(memory_rag_config, embeddings=embedder)
    yield module
    await module.close()


async def ingest_all(rag: RAGModule) -> None:
    for source, text in DOCUMENTS.items():
        await rag.add_document(text, {"source": source})


class TestRagPipeline:
    """Ingestion, retrieval and deletion through the module."""

    @pytest.mark.asyncio
    async def test_single_document_round_trip(self, rag):
        ids = await rag.add_document(DOCUMENTS["a.txt"], {"source": "a.txt"})

        results = await rag.retrieve_context("Tell me about UBC", RetrievalOptions(limit=1))

        assert len(ids) == 1
        assert len(results) == 1
        assert results[0].content == DOCUMENTS["a.txt"]
        assert results[0].metadata["source"] == "a.txt"
        assert results[0].metadata["chunkIndex"] == 0

    @pytest.mark.asyncio
    async def test_metadata_scan_returns_only_matching_document(self, rag):
        await rag.add_document(DOCUMENTS["a.txt"], {"source": "a.txt"})
        await rag.add_document(DOCUMENTS["b.txt"], {"source": "b.txt"})

        points = await rag.get_documents_by_metadata({"source": "b.txt"})

        assert len(points) == 1
        assert points[0].content == DOCUMENTS["b.txt"]
        assert points[0].metadata["source"] == "b.txt"

    @pytest.mark.asyncio
    async def test_metadata_scan_spans_pages(self, rag):
        await ingest_all(rag)

        points = await rag.get_documents_by_metadata({})

        assert sorted(p.metadata["source"] for p in points) == sorted(DOCUMENTS)

    @pytest.mark.asyncio
    async def test_results_ordered_by_score(self, rag):
        await ingest_all(rag)

        results = await rag.retrieve_context("university campus in Vancouver", {"limit": 4})

        scores = [r.score for r in results]
        assert len(results) == 4
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_score_threshold(self, rag):
        await ingest_all(rag)
        query = "public research university"
        scores = [r.score for r in await rag.retrieve_context(query, {"limit": 4})]
        threshold = (scores[0] + scores[-1]) / 2

        results = await rag.retrieve_context(query, {"limit": 4, "score_threshold": threshold})

        assert 0 < len(results) < 4
        assert all(r.score >= threshold for r in results)

    @pytest.mark.asyncio
    async def test_retrieval_filter(self, rag):
        await ingest_all(rag)

        results = await rag.retrieve_context("university", {"limit": 4, "filter": {"source": "c.txt"}})

        assert [r.metadata["source"] for r in results] == ["c.txt"]

    @pytest.mark.asyncio
    async def test_delete_by_ids(self, rag):
        keep = await rag.add_document(DOCUMENTS["a.txt"], {"source": "a.txt"})
        drop = await rag.add_document(DOCUMENTS["b.txt"], {"source": "b.txt"})

        await rag.delete_documents_by_ids(drop)
        await rag.delete_documents_by_ids([])

        remaining = await rag.get_documents_by_metadata({})
        assert [p.id for p in remaining] == keep

    @pytest.mark.asyncio
    async def test_delete_by_metadata(self, rag):
        await ingest_all(rag)

        await rag.delete_documents_by_metadata({"source": "a.txt"})

        assert await rag.get_documents_by_metadata({"source": "a.txt"}) == []
        assert len(await rag.get_documents_by_metadata({})) == 3

    @pytest.mark.asyncio
    async def test_delete_storage_twice(self, rag):
        await ingest_all(rag)

        await rag.delete_storage()
        await rag.delete_storage()


class TestPartialIngestion:
    """Chunks whose embedding fails are dropped, the rest are stored."""

    @pytest.mark.asyncio
    async def test_failed_third_chunk(self, memory_rag_config):
        config = memory_rag_config.model_copy(
            update={"chunking_config": ChunkingConfig(chunk_size=10, chunk_overlap=2)}
        )
        embedder = HashEmbedder(fail_indices={2})
        async with await RAGModule.create(config, embeddings=embedder) as rag:
            ids = await rag.add_document("abcdefghijklmnopqrstuvwxyz", {"source": "partial.txt"})
            points = await rag.get_documents_by_metadata({"source": "partial.txt"})

        assert len(embedder.calls[0]) == 3
        assert len(ids) == 2
        assert sorted(p.id for p in points) == sorted(ids)
        assert sorted(p.metadata["chunkIndex"] for p in points) == [0, 1]


class TestCollectionVerification:
    """Existing collections must match the configured vector parameters."""

    @pytest.mark.asyncio
    async def test_mismatched_collection_is_rejected(self, memory_client, memory_qdrant_config, embedder):
        await memory_client.create_collection(
            collection_name=memory_qdrant_config.collection_name,
            vectors_config=VectorParams(size=8, distance=Distance.COSINE),
        )
        provider = QdrantProvider(memory_qdrant_config, embedder, client=memory_client)

        with pytest.raises(InitializationError, match="vector size 8"):
            await provider.initialize()

    @pytest.mark.asyncio
    async def test_matching_collection_is_reused(self, memory_client, memory_qdrant_config, embedder):
        first = QdrantProvider(memory_qdrant_config, embedder, client=memory_client)
        await first.initialize()
        await first.add_document("persisted chunk", {"source": "keep.txt"})

        second = QdrantProvider(memory_qdrant_config, embedder, client=memory_client)
        await second.initialize()

        points = await second.get_documents_by_metadata({"source": "keep.txt"})
        assert [p.content for p in points] == ["persisted chunk"]
