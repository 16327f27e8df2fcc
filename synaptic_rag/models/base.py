"""Base model classes for Synaptic RAG."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SynapticBaseModel(BaseModel):
    """Base model with common configuration for all Synaptic RAG models."""

    model_config = ConfigDict(
        # Keep enum objects in memory, serialize values only when needed
        use_enum_values=False,
        # Allow population by field name or alias
        populate_by_name=True,
        # Validate assignment after model creation
        validate_assignment=True,
        extra='forbid',
    )


class FrozenModel(SynapticBaseModel):
    """Base model for configuration objects that must not change once built."""

    model_config = ConfigDict(frozen=True)


class LifecycleState(str, Enum):
    """Lifecycle of the facade and its provider.

    A failed initialization falls back to UNINITIALIZED; READY is only left by
    closing, and CLOSED is terminal.
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    CLOSED = "closed"
