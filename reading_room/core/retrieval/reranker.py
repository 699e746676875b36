"""
Completion-assisted re-ranking.

Asks the completion service to score targeted results 0-100. Scores
replace relevance (score / 100) for the leading pool only; documents past
the pool keep retrieval scores and must stay behind it. Any failure keeps
the similarity order.

Dependencies: reading_room.boundary.llm (completion service)
System role: Optional re-ranking step for targeted intents
"""

import json
import logging

from reading_room.core.exceptions import GenerationError
from reading_room.core.retrieval.prompts import RERANK_PROMPT
from reading_room.core.retrieval.text_utils import truncate
from reading_room.models.document import LogicalDocument

logger = logging.getLogger(__name__)


class LLMReranker:
    """Re-score the leading documents of a ranked list."""

    def __init__(self, completion_service, pool_size: int = 15, snippet_length: int = 400) -> None:
        self.completion_service = completion_service
        self.pool_size = pool_size
        self.snippet_length = snippet_length

    def _render(self, documents: list[LogicalDocument]) -> str:
        blocks = []
        for index, document in enumerate(documents, start=1):
            blocks.append(
                f"[{index}] {document.title} by {document.author or 'Unknown'}\n"
                f"{truncate(document.content, self.snippet_length)}"
            )
        return "\n\n".join(blocks)

    def _parse(self, raw: str, count: int) -> dict[int, float]:
        start, end = raw.find("["), raw.rfind("]")
        if start == -1 or end <= start:
            raise ValueError("no JSON array in reply")
        scores: dict[int, float] = {}
        for item in json.loads(raw[start:end + 1]):
            index = int(item["index"])
            if 1 <= index <= count:
                scores[index] = max(0.0, min(100.0, float(item["score"]))) / 100.0
        return scores

    async def rerank(self, query: str, documents: list[LogicalDocument]) -> list[LogicalDocument]:
        """
        Re-score the first pool_size documents.

        Args:
            query: Search query
            documents: Relevance-ordered documents

        Returns:
            list[LogicalDocument]: Same documents. The first pool_size carry the new
                relevance (0.0 when the reply skipped them); the rest are untouched.
                On failure the input is returned unchanged.
        """
        pool = documents[: self.pool_size]
        if len(pool) < 2:
            return documents

        messages = RERANK_PROMPT.format_messages(question=query, documents=self._render(pool))
        try:
            raw = await self.completion_service.complete(messages, max_tokens=400)
            scores = self._parse(raw, len(pool))
        except (GenerationError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"{__name__}:rerank - Keeping similarity order: {type(e).__name__}: {e}")
            return documents

        rescored = [
            document.model_copy(update={"relevance_score": scores.get(index, 0.0)})
            for index, document in enumerate(pool, start=1)
        ]
        logger.info(f"{__name__}:rerank - Re-scored {len(scores)}/{len(pool)} documents")
        return rescored + documents[self.pool_size:]
