"""Core facade and exceptions."""

from .exceptions import (
    BackendOperationError,
    ConfigurationError,
    EmbeddingError,
    InitializationError,
    NotReadyError,
    SynapticError,
    ValidationError,
)
from .module import RAGModule

__all__ = [
    "RAGModule",
    "SynapticError",
    "ConfigurationError",
    "InitializationError",
    "NotReadyError",
    "BackendOperationError",
    "EmbeddingError",
    "ValidationError",
]
