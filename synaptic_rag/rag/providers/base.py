"""Contract implemented by every RAG provider."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ...models.rag import RetrievalOptions, RetrievedChunk, StoredPoint


class RAGProvider(ABC):
    """Ingestion and retrieval against one vector store backend."""

    @abstractmethod
    async def initialize(self) -> None:
        """Connect and make sure the backing collection exists."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend connections."""
        pass

    @abstractmethod
    async def add_document(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> List[str]:
        """Chunk, embed and store a document, returning the stored chunk ids."""
        pass

    @abstractmethod
    async def retrieve_context(
        self,
        query_text: str,
        options: Optional[RetrievalOptions] = None,
    ) -> List[RetrievedChunk]:
        """Return the chunks most similar to the query, best first."""
        pass

    @abstractmethod
    async def get_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> List[StoredPoint]:
        """Return every stored chunk whose payload matches the filter."""
        pass

    @abstractmethod
    async def delete_documents_by_ids(self, ids: List[str]) -> None:
        """Delete stored chunks by id."""
        pass

    @abstractmethod
    async def delete_documents_by_metadata(self, filter_dict: Dict[str, Any]) -> None:
        """Delete stored chunks whose payload matches the filter."""
        pass

    @abstractmethod
    async def delete_storage(self) -> None:
        """Drop the whole backing collection."""
        pass
