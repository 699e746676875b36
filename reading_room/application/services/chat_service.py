"""
Chat service for document Q&A.

Orchestrates the chat flow: retrieval pipeline, answer generation against
the rendered context, and mapping to the response schema with sources.

Dependencies: reading_room.core.retrieval, reading_room.boundary.llm
System role: Chat service orchestration layer
"""

import logging

from reading_room.core.retrieval.pipeline import RetrievalPipeline
from reading_room.core.retrieval.prompts import ANSWER_PROMPT, SMALL_TALK_PROMPT
from reading_room.core.retrieval.text_utils import truncate
from reading_room.models.chat import CatalogResponse, ChatRequest, ChatResponse, SourceDocument
from reading_room.models.document import LogicalDocument
from reading_room.models.result import RetrievalResult
from reading_room.models.retrieval import ChatTurn, ContentFilter

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 300


def to_source(document: LogicalDocument) -> SourceDocument:
    """Map a logical document to the response source entry."""
    return SourceDocument(
        title=document.title,
        author=document.author,
        doc_type=document.doc_type,
        topic=document.topic,
        genre=document.genre,
        difficulty=document.difficulty,
        snippet=truncate(document.content, SNIPPET_LENGTH),
        relevance_score=round(document.relevance_score, 4),
        match_type=document.match_type.value,
        provenance=document.provenance.value,
        chunks_available=document.chunks_available,
    )


class ChatService:
    """
    Chat service for retrieval-grounded answers.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        pipeline: RetrievalPipeline,
        completion_service,
        history_window: int = 4,
    ) -> None:
        """
        Initialize chat service.

        Args:
            pipeline: Retrieval pipeline
            completion_service: Object with async complete(messages, model=None, max_tokens=None)
            history_window: Prior turns passed to the answer prompt
        """
        self.pipeline = pipeline
        self.completion_service = completion_service
        self.history_window = history_window

    def _history_messages(self, history: list[ChatTurn]) -> list[tuple[str, str]]:
        messages = []
        for turn in history[-self.history_window:]:
            role = "human" if turn.role.lower() in ("user", "human") else "ai"
            messages.append((role, turn.content))
        return messages

    async def _answer(self, message: str, history: list[ChatTurn], result: RetrievalResult) -> str:
        if not result.classification.needs_retrieval:
            prompt_messages = SMALL_TALK_PROMPT.format_messages(question=message)
        else:
            prompt_messages = ANSWER_PROMPT.format_messages(
                documents_found=len(result.documents),
                context=result.context,
                history=self._history_messages(history),
                question=message,
            )
        return await self.completion_service.complete(prompt_messages)

    async def process_chat(self, request: ChatRequest) -> ChatResponse:
        """
        Process chat message through the full retrieval flow.

        Flow:
        1. Run the retrieval pipeline (pronouns, classification, strategies, ranking)
        2. Generate an answer constrained to the rendered context
        3. Map documents to sources

        Args:
            request: Chat request with message, history and optional page

        Returns:
            ChatResponse: Answer with sources and pagination state

        Raises:
            MalformedQueryError: If the message is empty
            AllStrategiesFailedError: If no strategy could search the store
            GenerationError: If the answer could not be generated
        """
        logger.info(f"{__name__}:process_chat - START message_len={len(request.message or '')}")

        result = await self.pipeline.retrieve(
            request.message,
            history=request.chat_history,
            page=request.page,
        )
        logger.info(
            f"{__name__}:process_chat - Retrieval OK: {len(result.documents)} documents "
            f"via {result.strategy}"
        )

        answer = await self._answer(request.message.strip(), request.chat_history, result)
        logger.info(f"{__name__}:process_chat - Answer generated, len={len(answer)}")

        return ChatResponse(
            response=answer,
            sources=[to_source(d) for d in result.documents],
            documents_found=len(result.documents),
            total_documents_available=result.total_available,
            retrieval_method=result.strategy,
            warning=result.warning,
            has_more=result.has_more,
            remaining=result.remaining,
            query_type=result.classification.query_type.value,
            confidence=result.classification.confidence,
        )

    async def get_catalog(
        self,
        page: int = 1,
        content_filter: ContentFilter = ContentFilter.ALL,
    ) -> CatalogResponse:
        """
        Return one alphabetical catalog page. No completion call is made.

        Args:
            page: 1-based page
            content_filter: books, videos or all

        Returns:
            CatalogResponse: Catalog page with pagination state
        """
        result = await self.pipeline.catalog_page(page=page, content_filter=content_filter)
        return CatalogResponse(
            documents=[to_source(d) for d in result.documents],
            page=result.page,
            total_pages=result.total_pages,
            total_documents_available=result.total_available,
            has_more=result.has_more,
            remaining=result.remaining,
            content_filter=content_filter.value,
            warning=result.warning,
        )
