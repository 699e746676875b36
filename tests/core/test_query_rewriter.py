"""
Test suite for QueryRewriter.

System role: Verification of pronoun resolution
"""

from reading_room.core.exceptions import GenerationError
from reading_room.core.retrieval.query_rewriter import QueryRewriter
from reading_room.models.retrieval import ChatTurn

from tests.fakes import FakeCompletionService

HISTORY = [
    ChatTurn(role="user", content="Tell me about Principles"),
    ChatTurn(role="assistant", content="Principles is by Ray Dalio."),
]


class TestResolve:
    """Test suite for resolve()."""

    async def test_pronoun_with_history_should_be_rewritten(self) -> None:
        # Arrange
        completion = FakeCompletionService(replies=['"What else did Ray Dalio write?"'])
        rewriter = QueryRewriter(completion)

        # Act
        resolved = await rewriter.resolve("what else did he write?", HISTORY)

        # Assert
        assert resolved == "What else did Ray Dalio write?"
        assert len(completion.calls) == 1

    async def test_no_history_should_skip_completion(self) -> None:
        completion = FakeCompletionService()

        resolved = await QueryRewriter(completion).resolve("what else did he write?", [])

        assert resolved == "what else did he write?"
        assert completion.calls == []

    async def test_no_pronoun_should_skip_completion(self) -> None:
        completion = FakeCompletionService()

        resolved = await QueryRewriter(completion).resolve("books on leadership", HISTORY)

        assert resolved == "books on leadership"
        assert completion.calls == []

    async def test_failure_should_fall_back_to_original(self) -> None:
        completion = FakeCompletionService(replies=[GenerationError("provider down")])

        resolved = await QueryRewriter(completion).resolve("who wrote it?", HISTORY)

        assert resolved == "who wrote it?"

    def test_history_should_be_windowed_and_truncated(self) -> None:
        rewriter = QueryRewriter(FakeCompletionService(), history_window=1, turn_length=10)

        rendered = rewriter.format_history(HISTORY)

        assert rendered == "Assistant: Principles..."
