"""
Test suite for chat API endpoint.

Tests POST /chat with FastAPI TestClient. Covers the camelCase response
contract, pagination fields and error-to-status mapping.

System role: Verification of chat HTTP API endpoint
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reading_room.api.deps import get_chat_service
from reading_room.api.routers.chat import router
from reading_room.api.routers.router_utils import APOLOGY_MESSAGE, NO_DOCUMENTS_MESSAGE
from reading_room.application.services.chat_service import ChatService
from reading_room.configs.retrieval import RetrievalSettings
from reading_room.core.exceptions import AllStrategiesFailedError, GenerationError
from reading_room.core.retrieval.factory import build_pipeline

from tests.fakes import FakeChunkStore, FakeCompletionService, FakeEmbeddingService, build_chunk


@pytest.fixture
def app() -> FastAPI:
    """Create FastAPI test application with chat router."""
    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide TestClient for the FastAPI app."""
    return TestClient(app)


def override_with_store(app: FastAPI, store: FakeChunkStore, completion=None) -> FakeCompletionService:
    completion = completion or FakeCompletionService(default="Here are the documents I found.")
    settings = RetrievalSettings(enable_query_analysis=False, enable_pronoun_resolution=False)
    service = ChatService(build_pipeline(settings, store, FakeEmbeddingService(), completion), completion)
    app.dependency_overrides[get_chat_service] = lambda: service
    return completion


class TestChatEndpoint:
    """Test suite for POST /chat."""

    def test_catalog_request_should_return_camel_case_page(self, app, client, catalog_chunks) -> None:
        # Arrange
        override_with_store(app, FakeChunkStore(chunks=catalog_chunks))

        # Act
        response = client.post("/chat", json={"message": "show me all the content"})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["response"] == "Here are the documents I found."
        assert body["documentsFound"] == 20
        assert body["totalDocumentsAvailable"] == 25
        assert body["hasMore"] is True
        assert body["remaining"] == 5
        assert body["retrievalMethod"] == "catalog_browse"
        assert len(body["sources"]) == 20
        assert set(body["sources"][0]) >= {"title", "author", "docType", "relevanceScore", "matchType", "chunksAvailable"}

    def test_explicit_page_should_return_next_page(self, app, client, catalog_chunks) -> None:
        override_with_store(app, FakeChunkStore(chunks=catalog_chunks))

        response = client.post("/chat", json={"message": "show me all the content", "page": 2})

        body = response.json()
        assert body["documentsFound"] == 5
        assert body["hasMore"] is False
        assert body["sources"][0]["title"] == "Title U"

    def test_greeting_should_return_no_sources(self, app, client) -> None:
        store = FakeChunkStore(chunks=[build_chunk("a", "Anything")])
        override_with_store(app, store, FakeCompletionService(default="Hello!"))

        response = client.post("/chat", json={"message": "hello", "chatHistory": []})

        assert response.status_code == 200
        assert response.json()["sources"] == []
        assert store.calls == []

    @pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"message": None}])
    def test_missing_message_should_return_400(self, app, client, payload) -> None:
        override_with_store(app, FakeChunkStore())

        response = client.post("/chat", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Message is required"

    def test_all_strategies_failing_should_return_503(self, app, client) -> None:
        service = AsyncMock()
        service.process_chat.side_effect = AllStrategiesFailedError(["semantic"])
        app.dependency_overrides[get_chat_service] = lambda: service

        response = client.post("/chat", json={"message": "what is leverage?"})

        assert response.status_code == 503
        assert response.json()["detail"] == NO_DOCUMENTS_MESSAGE

    def test_generation_failure_should_return_apology(self, app, client, catalog_chunks) -> None:
        override_with_store(app, FakeChunkStore(chunks=catalog_chunks), FakeCompletionService(fail=True))

        response = client.post("/chat", json={"message": "show me all the content"})

        assert response.status_code == 500
        assert response.json()["detail"] == APOLOGY_MESSAGE

    def test_unexpected_error_should_not_leak_details(self, app, client) -> None:
        service = AsyncMock()
        service.process_chat.side_effect = RuntimeError("connection string postgres://secret")
        app.dependency_overrides[get_chat_service] = lambda: service

        response = client.post("/chat", json={"message": "anything"})

        assert response.status_code == 500
        assert "secret" not in response.text
