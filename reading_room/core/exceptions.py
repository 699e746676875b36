"""
Exception hierarchy for the Reading Room application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ReadingRoomException(Exception):
    """Base exception for all Reading Room application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ReadingRoomException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class MalformedQueryError(ValidationError):
    """Raised when the query text is empty or missing. No retrieval is attempted."""

    def __init__(self, message: str = "Message is required", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, field="message", details=details)


class ChunkStoreError(ReadingRoomException):
    """Raised when chunk store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize chunk store error.

        Args:
            message: Error message
            operation: Operation that failed (vector_search, filter_search, scan_all)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class EmbeddingError(ReadingRoomException):
    """Raised when embedding generation fails."""

    pass


class GenerationError(ReadingRoomException):
    """Raised when the completion provider fails to produce a response."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize generation error.

        Args:
            message: Error message
            model: Model identifier that failed
            details: Additional context
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class RetrievalError(ReadingRoomException):
    """Raised when retrieval operations fail."""

    pass


class StrategyUnavailableError(RetrievalError):
    """Raised when a single retrieval strategy's backing call fails."""

    def __init__(
        self,
        strategy: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize strategy failure.

        Args:
            strategy: Strategy name (semantic, metadata, entity_name, catalog_scan)
            reason: Short description of the underlying failure
            details: Additional context
        """
        details = details or {}
        details["strategy"] = strategy
        self.strategy = strategy
        super().__init__(f"Strategy '{strategy}' unavailable: {reason}", details)


class AllStrategiesFailedError(RetrievalError):
    """Raised when every strategy selected for a query failed."""

    def __init__(
        self,
        strategies: list[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize total retrieval failure.

        Args:
            strategies: Names of the strategies that were attempted
            details: Additional context
        """
        details = details or {}
        details["strategies"] = strategies
        self.strategies = strategies
        super().__init__("No documents could be searched", details)


class ClassificationFallbackError(ReadingRoomException):
    """Raised when completion-assisted query analysis fails. Always recovered locally."""

    pass
