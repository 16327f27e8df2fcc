"""Point ingestion, scanning and deletion for the Qdrant provider."""

from typing import Any, Dict, List, Optional
from uuid import uuid4

from qdrant_client.models import FilterSelector, PointIdsList, PointStruct

from ....core.exceptions import BackendOperationError, EmbeddingError
from ....models.config import ChunkFunction
from ....models.rag import CHUNK_INDEX_FIELD, CONTENT_FIELD, StoredPoint
from ...embeddings import EmbeddingClient
from .filters import build_filter


class DocumentOperations:
    """Handles chunk ingestion and metadata-driven bulk operations."""

    def __init__(
        self,
        client,
        collection_name: str,
        embeddings: EmbeddingClient,
        chunker: ChunkFunction,
        page_size: int,
        logger,
    ):
        self.client = client
        self.collection_name = collection_name
        self.embeddings = embeddings
        self.chunker = chunker
        self.page_size = page_size
        self.logger = logger

    async def add_document(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[str]:
        """Chunk, embed and upsert a document, returning the stored chunk ids."""
        metadata = metadata or {}
        chunks = [chunk for chunk in self.chunker(content) if chunk]
        self.logger.debug("Document split into chunks", chunks=len(chunks))
        if not chunks:
            self.logger.warning("Document content resulted in zero chunks, nothing to add")
            return []

        try:
            embeddings = await self.embeddings.embed(chunks)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to embed document chunks: {e}") from e

        points: List[PointStruct] = []
        for index, chunk in enumerate(chunks):
            vector = embeddings[index] if index < len(embeddings) else None
            if vector is None:
                self.logger.warning("Skipping chunk without embedding", chunk_index=index)
                continue
            points.append(
                PointStruct(
                    id=str(uuid4()),
                    vector=vector,
                    payload={
                        **metadata,
                        CONTENT_FIELD: chunk,
                        CHUNK_INDEX_FIELD: index,
                    },
                )
            )

        self.logger.info("Chunks embedded", embedded=len(points), total=len(chunks))
        if not points:
            self.logger.warning("All chunks failed to produce embeddings, nothing to upsert")
            return []

        try:
            await self.client.upsert(
                collection_name=self.collection_name,
                points=points,
                wait=True,
            )
        except Exception as e:
            self.logger.error("Failed to upsert points", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant upsert failed: {e}", "upsert", self.collection_name
            ) from e

        self.logger.info("Points upserted", collection=self.collection_name, count=len(points))
        return [str(point.id) for point in points]

    async def get_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> List[StoredPoint]:
        """Scroll through every point matching all key/value pairs."""
        scroll_filter = build_filter(filter_dict)
        records = []
        offset = None

        try:
            while True:
                page, offset = await self.client.scroll(
                    collection_name=self.collection_name,
                    scroll_filter=scroll_filter,
                    limit=self.page_size,
                    offset=offset,
                    with_payload=True,
                    with_vectors=True,
                )
                records.extend(page)
                if offset is None:
                    break
        except Exception as e:
            self.logger.error("Failed to scroll points", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant scroll failed: {e}", "scroll", self.collection_name
            ) from e

        self.logger.debug("Points retrieved by metadata", filter=filter_dict, count=len(records))
        return [
            StoredPoint(
                id=str(record.id),
                content=(record.payload or {}).get(CONTENT_FIELD),
                metadata=dict(record.payload or {}),
                vector=record.vector,
            )
            for record in records
        ]

    async def delete_documents_by_ids(self, ids: List[str]) -> None:
        """Delete points by id in a single request."""
        if not ids:
            self.logger.warning("No ids provided for deletion")
            return

        self.logger.info("Deleting points by id", collection=self.collection_name, count=len(ids))
        try:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=PointIdsList(points=list(ids)),
                wait=True,
            )
        except Exception as e:
            self.logger.error("Failed to delete points by id", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant deletion by id failed: {e}", "delete_by_ids", self.collection_name
            ) from e

        self.logger.info("Points deleted by id", count=len(ids))

    async def delete_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> None:
        """Delete every point matching all key/value pairs.

        Qdrant does not report how many points were removed; returning means
        the request was accepted.
        """
        if not filter_dict:
            self.logger.warning("No filter provided for deletion by metadata")
            return

        selector = FilterSelector(filter=build_filter(filter_dict))
        self.logger.info("Deleting points by metadata", collection=self.collection_name, filter=filter_dict)
        try:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=selector,
                wait=True,
            )
        except Exception as e:
            self.logger.error("Failed to delete points by metadata", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant deletion by filter failed: {e}", "delete_by_metadata", self.collection_name
            ) from e

        self.logger.info("Deletion by metadata accepted", filter=filter_dict)
