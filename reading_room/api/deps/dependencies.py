"""
Dependency injection container.

Factory functions for FastAPI dependencies. Chunk store, embedding and
completion clients are built once per process and shared.

Dependencies: reading_room.configs, reading_room.application, reading_room.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from reading_room.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._chunk_store = None
        self._embedding_service = None
        self._completion_service = None
        self._pipeline = None
        self._chat_service = None

    @property
    def chunk_store(self):
        """Get cached chunk store."""
        if self._chunk_store is None:
            from reading_room.boundary.db import ChunkStore, get_async_session_factory
            self._chunk_store = ChunkStore(get_async_session_factory())
        return self._chunk_store

    @property
    def embedding_service(self):
        """Get cached embedding service."""
        if self._embedding_service is None:
            from reading_room.boundary.llm import EmbeddingService

            llm = get_settings().llm
            self._embedding_service = EmbeddingService(
                model=llm.embedding_model,
                dimension=llm.embedding_dimension,
                retry_attempts=llm.retry_attempts,
            )
        return self._embedding_service

    @property
    def completion_service(self):
        """Get cached completion service."""
        if self._completion_service is None:
            from reading_room.boundary.llm import CompletionService

            llm = get_settings().llm
            self._completion_service = CompletionService(
                default_model=llm.chat_model,
                temperature=llm.temperature,
                max_tokens=llm.max_tokens,
                retry_attempts=llm.retry_attempts,
            )
        return self._completion_service

    @property
    def pipeline(self):
        """Get cached retrieval pipeline."""
        if self._pipeline is None:
            from reading_room.core.retrieval.factory import build_pipeline

            self._pipeline = build_pipeline(
                settings=get_settings().retrieval,
                chunk_store=self.chunk_store,
                embedding_service=self.embedding_service,
                completion_service=self.completion_service,
            )
        return self._pipeline

    @property
    def chat_service(self):
        """Get cached chat service."""
        if self._chat_service is None:
            from reading_room.application.services import ChatService

            self._chat_service = ChatService(
                pipeline=self.pipeline,
                completion_service=self.completion_service,
                history_window=get_settings().retrieval.history_window,
            )
        return self._chat_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._chunk_store = None
        self._embedding_service = None
        self._completion_service = None
        self._pipeline = None
        self._chat_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_chat_service():
    """
    Get chat service instance.

    Returns:
        ChatService: Chat service with the shared retrieval pipeline
    """
    return get_service_cache().chat_service


def get_chunk_store():
    """
    Get chunk store instance.

    Returns:
        ChunkStore: Read adapter over the chunk table
    """
    return get_service_cache().chunk_store
