"""
Test suite for dependency injection container.

Tests lazy construction, sharing and clearing of the cached service
instances.

System role: Verification of DI container
"""

import pytest

from reading_room.api.deps import get_service_cache, get_settings_dependency
from reading_room.api.deps.dependencies import ServiceCache
from reading_room.application.services import ChatService
from reading_room.boundary.llm import CompletionService
from reading_room.configs import Settings
from reading_room.core.retrieval import RetrievalPipeline

from tests.fakes import FakeChunkStore, FakeCompletionService, FakeEmbeddingService


@pytest.fixture
def cache() -> ServiceCache:
    """Service cache with fake boundary clients preloaded."""
    cache = ServiceCache()
    cache._chunk_store = FakeChunkStore()
    cache._embedding_service = FakeEmbeddingService()
    cache._completion_service = FakeCompletionService()
    return cache


class TestServiceCache:
    """Test suite for ServiceCache."""

    def test_pipeline_should_be_built_once(self, cache: ServiceCache) -> None:
        first = cache.pipeline
        second = cache.pipeline

        assert isinstance(first, RetrievalPipeline)
        assert first is second

    def test_chat_service_should_share_pipeline_and_completion(self, cache: ServiceCache) -> None:
        service = cache.chat_service

        assert isinstance(service, ChatService)
        assert service.pipeline is cache.pipeline
        assert service.completion_service is cache.completion_service

    def test_completion_service_should_use_settings_model(self) -> None:
        cache = ServiceCache()

        service = cache.completion_service

        assert isinstance(service, CompletionService)
        assert service.default_model == get_settings_dependency().llm.chat_model

    def test_clear_should_drop_instances(self, cache: ServiceCache) -> None:
        _ = cache.chat_service

        cache.clear()

        assert cache._pipeline is None
        assert cache._chat_service is None
        assert cache._chunk_store is None


def test_service_cache_should_be_singleton():
    assert get_service_cache() is get_service_cache()


def test_settings_dependency_should_return_settings():
    assert isinstance(get_settings_dependency(), Settings)
