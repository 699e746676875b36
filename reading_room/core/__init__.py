"""
Core business logic module.

Contains the exception hierarchy and the retrieval orchestration pipeline.
All business rules and domain-specific logic reside here.
"""

from reading_room.core.exceptions import (
    AllStrategiesFailedError,
    ChunkStoreError,
    ClassificationFallbackError,
    EmbeddingError,
    GenerationError,
    MalformedQueryError,
    ReadingRoomException,
    RetrievalError,
    StrategyUnavailableError,
    ValidationError,
)

__all__ = [
    "AllStrategiesFailedError",
    "ChunkStoreError",
    "ClassificationFallbackError",
    "EmbeddingError",
    "GenerationError",
    "MalformedQueryError",
    "ReadingRoomException",
    "RetrievalError",
    "StrategyUnavailableError",
    "ValidationError",
]
