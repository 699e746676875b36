"""
Pronoun resolution for follow-up questions.

Rewrites "tell me more about him" into a standalone search query using
the last few conversation turns. History is only read here; it is never
sent to the chunk store.

Dependencies: reading_room.boundary.llm (completion service)
System role: Query preprocessing before classification
"""

import logging

from reading_room.core.exceptions import GenerationError
from reading_room.core.retrieval.prompts import PRONOUN_RESOLUTION_PROMPT
from reading_room.core.retrieval.text_utils import has_pronoun, truncate
from reading_room.models.retrieval import ChatTurn

logger = logging.getLogger(__name__)


class QueryRewriter:
    """Resolve pronouns against recent conversation turns."""

    def __init__(self, completion_service, history_window: int = 4, turn_length: int = 150) -> None:
        self.completion_service = completion_service
        self.history_window = history_window
        self.turn_length = turn_length

    def format_history(self, history: list[ChatTurn]) -> str:
        lines = []
        for turn in history[-self.history_window:]:
            role = "User" if turn.role.lower() in ("user", "human") else "Assistant"
            lines.append(f"{role}: {truncate(turn.content, self.turn_length)}")
        return "\n".join(lines)

    async def resolve(self, query: str, history: list[ChatTurn]) -> str:
        """
        Return a standalone search query.

        Args:
            query: Current user message
            history: Prior turns, oldest first

        Returns:
            str: Rewritten query, or the original when no rewrite applies or the call fails
        """
        if not history or not has_pronoun(query):
            return query

        messages = PRONOUN_RESOLUTION_PROMPT.format_messages(
            conversation=self.format_history(history),
            question=query,
        )
        try:
            rewritten = await self.completion_service.complete(messages, max_tokens=100)
        except GenerationError as e:
            logger.warning(f"{__name__}:resolve - Pronoun resolution failed, using original query: {e.message}")
            return query

        rewritten = rewritten.strip().strip('"').strip()
        if not rewritten:
            return query
        logger.info(f"{__name__}:resolve - Resolved query: {truncate(rewritten, 100)!r}")
        return rewritten
