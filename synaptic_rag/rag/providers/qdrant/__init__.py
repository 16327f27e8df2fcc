"""
Qdrant-backed RAG provider.

- **Core**: ``QdrantProvider`` owns the client, the collection lifecycle and
  the readiness state, and delegates to the handlers below
- **Documents**: chunk ingestion, paginated metadata scans and deletions
- **Search**: query embedding and ranked similarity search
- **Filters**: flat key/value maps translated into Qdrant ``must`` filters
"""

from .core import QdrantProvider
from .filters import build_filter

__all__ = ["QdrantProvider", "build_filter"]
