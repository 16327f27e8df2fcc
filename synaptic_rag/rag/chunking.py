"""Document chunking for ingestion.

Chunking is a plain callable ``(text) -> List[str]``. The default is a fixed
character window sliding with a configurable overlap; callers can pass any
other function with the same signature through ``RAGConfig.chunking_config``.
"""

from functools import partial
from typing import List, Optional, Union

from ..config.logging import rag_logger
from ..models.config import ChunkFunction, ChunkingConfig

DEFAULT_CHUNK_SIZE = 300
DEFAULT_CHUNK_OVERLAP = 50


def fixed_window_chunker(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """Split text into windows of ``chunk_size`` characters.

    Consecutive windows share ``chunk_overlap`` characters. Text no longer than
    one window comes back as a single chunk, and empty text yields no chunks.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must not be negative")
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")

    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    step = chunk_size - chunk_overlap
    chunks: List[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])
        if end == len(text):
            break
        start += step
    return chunks


def resolve_chunker(
    chunking_config: Optional[Union[ChunkingConfig, ChunkFunction]] = None,
) -> ChunkFunction:
    """Turn the configured chunking option into a chunk function."""
    if chunking_config is None:
        return fixed_window_chunker

    if isinstance(chunking_config, ChunkingConfig):
        rag_logger.debug(
            "Using fixed window chunker",
            chunk_size=chunking_config.chunk_size,
            chunk_overlap=chunking_config.chunk_overlap,
        )
        return partial(
            fixed_window_chunker,
            chunk_size=chunking_config.chunk_size,
            chunk_overlap=chunking_config.chunk_overlap,
        )

    if callable(chunking_config):
        rag_logger.debug("Using custom chunk function")
        return chunking_config

    raise TypeError(f"Unsupported chunking configuration: {type(chunking_config).__name__}")
