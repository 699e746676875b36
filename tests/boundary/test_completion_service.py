"""
Unit tests for CompletionService with the Gemini chat model mocked.

System role: Verification of the completion boundary
"""

from unittest.mock import AsyncMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from tenacity import wait_none

from reading_room.boundary.llm.completion_service import (
    CompletionService,
    content_to_text,
    to_langchain_messages,
)
from reading_room.core.exceptions import GenerationError

MODULE = "reading_room.boundary.llm.completion_service"


@pytest.fixture
def mock_chat_cls():
    with patch(f"{MODULE}.ChatGoogleGenerativeAI") as chat_cls:
        chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="  An answer.  "))
        yield chat_cls


class TestMessageConversion:
    """Test suite for message helpers."""

    def test_roles_should_map_to_langchain_messages(self) -> None:
        messages = to_langchain_messages([
            {"role": "system", "content": "rules"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
            HumanMessage(content="passthrough"),
        ])

        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert messages[3].content == "passthrough"

    def test_unknown_role_should_raise(self) -> None:
        with pytest.raises(GenerationError):
            to_langchain_messages([{"role": "tool", "content": "x"}])

    def test_content_parts_should_be_joined(self) -> None:
        assert content_to_text([{"type": "text", "text": "a"}, "b", {"type": "image"}]) == "ab"
        assert content_to_text("plain") == "plain"


class TestComplete:
    """Test suite for complete()."""

    async def test_should_return_stripped_text(self, mock_chat_cls) -> None:
        # Arrange
        service = CompletionService("gemini-test", retry_attempts=1)

        # Act
        text = await service.complete([{"role": "user", "content": "hi"}])

        # Assert
        assert text == "An answer."
        mock_chat_cls.assert_called_once_with(model="gemini-test", temperature=0.1, max_output_tokens=2000)

    async def test_models_should_be_cached_per_model_and_tokens(self, mock_chat_cls) -> None:
        service = CompletionService("gemini-test", retry_attempts=1)

        await service.complete([{"role": "user", "content": "a"}])
        await service.complete([{"role": "user", "content": "b"}])
        await service.complete([{"role": "user", "content": "c"}], max_tokens=100)

        assert mock_chat_cls.call_count == 2

    async def test_provider_failure_should_raise_generation_error(self, mock_chat_cls) -> None:
        mock_chat_cls.return_value.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))
        service = CompletionService("gemini-test", retry_attempts=1)

        with pytest.raises(GenerationError) as exc_info:
            await service.complete([{"role": "user", "content": "hi"}])

        assert exc_info.value.details["model"] == "gemini-test"
        assert exc_info.value.details["error_type"] == "RuntimeError"

    async def test_empty_response_should_raise_generation_error(self, mock_chat_cls) -> None:
        mock_chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="   "))
        service = CompletionService("gemini-test", retry_attempts=1)

        with pytest.raises(GenerationError):
            await service.complete([{"role": "user", "content": "hi"}])

    async def test_transient_failure_should_be_retried(self, mock_chat_cls) -> None:
        # Arrange
        mock_chat_cls.return_value.ainvoke = AsyncMock(
            side_effect=[RuntimeError("503"), AIMessage(content="second try")]
        )
        service = CompletionService("gemini-test", retry_attempts=2)
        service._retrying = service._retrying.copy(wait=wait_none())

        # Act
        text = await service.complete([{"role": "user", "content": "hi"}])

        # Assert
        assert text == "second try"
        assert mock_chat_cls.return_value.ainvoke.await_count == 2
