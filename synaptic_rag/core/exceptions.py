"""Custom exceptions for Synaptic RAG."""

from typing import Any, Dict, Optional


class SynapticError(Exception):
    """Base exception for all Synaptic RAG errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]
        if self.error_code:
            parts.append(f"(code: {self.error_code})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigurationError(SynapticError):
    """Raised when a required configuration value is missing or invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None) -> None:
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)
        self.config_key = config_key

    @classmethod
    def from_validation_error(cls, error: Any) -> "ConfigurationError":
        """Build from a pydantic ValidationError, keeping the first failing key."""
        errors = error.errors()
        if not errors:
            return cls(f"Invalid configuration: {error}")
        first = errors[0]
        config_key = ".".join(str(part) for part in first.get("loc", ())) or None
        return cls(f"Invalid configuration: {first.get('msg', error)}", config_key)


class InitializationError(SynapticError):
    """Raised when a component fails to reach the ready state."""

    def __init__(self, message: str, component: Optional[str] = None) -> None:
        details = {"component": component} if component else {}
        super().__init__(message, "INITIALIZATION_ERROR", details)
        self.component = component


class NotReadyError(SynapticError):
    """Raised when an operation is invoked before initialization completed."""

    def __init__(self, component: str) -> None:
        super().__init__(
            f"{component} has not been initialized. Use RAGModule.create() first.",
            "NOT_READY",
            {"component": component},
        )
        self.component = component


class BackendOperationError(SynapticError):
    """Raised when a vector store call fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if collection:
            details["collection"] = collection
        super().__init__(message, "BACKEND_OPERATION_ERROR", details)
        self.operation = operation
        self.collection = collection


class EmbeddingError(SynapticError):
    """Raised when there's an embedding generation issue."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "EMBEDDING_ERROR")


class ValidationError(SynapticError):
    """Raised when data validation fails."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field
