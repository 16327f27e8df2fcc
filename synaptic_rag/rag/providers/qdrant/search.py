"""Similarity search for the Qdrant provider."""

from typing import List, Optional

from ....core.exceptions import BackendOperationError, EmbeddingError
from ....models.rag import CONTENT_FIELD, RetrievalOptions, RetrievedChunk
from ...embeddings import EmbeddingClient
from .filters import build_filter

DEFAULT_LIMIT = 5


class SearchOperations:
    """Handles query embedding and ranked retrieval."""

    def __init__(self, client, collection_name: str, embeddings: EmbeddingClient, logger):
        self.client = client
        self.collection_name = collection_name
        self.embeddings = embeddings
        self.logger = logger

    async def retrieve_context(
        self,
        query_text: str,
        options: Optional[RetrievalOptions] = None,
    ) -> List[RetrievedChunk]:
        """Return the chunks closest to the query, best first."""
        options = options or RetrievalOptions()

        try:
            vectors = await self.embeddings.embed([query_text])
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to embed query: {e}") from e

        query_vector = vectors[0] if vectors else None
        if query_vector is None:
            raise EmbeddingError("Failed to generate embedding for the query text")

        try:
            response = await self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector,
                limit=options.limit or DEFAULT_LIMIT,
                score_threshold=options.score_threshold,
                query_filter=build_filter(options.filter),
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            self.logger.error("Failed to search points", collection=self.collection_name, error=str(e))
            raise BackendOperationError(
                f"Qdrant search failed: {e}", "search", self.collection_name
            ) from e

        results = []
        for point in response.points:
            payload = dict(point.payload or {})
            content = payload.pop(CONTENT_FIELD, None)
            results.append(
                RetrievedChunk(
                    content=content if isinstance(content, str) else "",
                    score=point.score,
                    metadata=payload or None,
                )
            )

        self.logger.debug("Search completed", collection=self.collection_name, results=len(results))
        return results
