"""
Retrieval orchestration pipeline.

query -> pronoun resolution -> classification -> multi-strategy retrieval
-> aggregation -> content filter -> (re-rank) -> ranking/pagination
-> context formatting.

Dependencies: reading_room.core.retrieval.*, reading_room.configs
System role: Single entry point for retrieval used by the chat service
"""

import logging

from reading_room.core.exceptions import MalformedQueryError
from reading_room.core.retrieval.aggregation import DocumentAggregator
from reading_room.core.retrieval.classifier import QueryClassifier
from reading_room.core.retrieval.formatter import ContextFormatter, collection_overview
from reading_room.core.retrieval.query_rewriter import QueryRewriter
from reading_room.core.retrieval.ranking import RankingEngine, apply_content_filter
from reading_room.core.retrieval.reranker import LLMReranker
from reading_room.core.retrieval.retriever import MultiStrategyRetriever, build_plan
from reading_room.models.document import LogicalDocument
from reading_room.models.result import RetrievalResult
from reading_room.models.retrieval import (
    ChatTurn,
    ContentFilter,
    PageInfo,
    QueryClassification,
    QueryType,
)
from reading_room.observability.log_utils import preview

logger = logging.getLogger(__name__)

MAX_REQUESTED_PAGE_SIZE = 100


class RetrievalPipeline:
    """
    Stateless retrieval orchestrator.

    All collaborators are built once at process start and injected.
    Nothing is stored on the instance between calls.
    """

    def __init__(
        self,
        classifier: QueryClassifier,
        retriever: MultiStrategyRetriever,
        aggregator: DocumentAggregator,
        ranker: RankingEngine,
        formatter: ContextFormatter,
        semantic_caps: dict[str, int],
        rewriter: QueryRewriter | None = None,
        reranker: LLMReranker | None = None,
    ) -> None:
        self.classifier = classifier
        self.retriever = retriever
        self.aggregator = aggregator
        self.ranker = ranker
        self.formatter = formatter
        self.semantic_caps = semantic_caps
        self.rewriter = rewriter
        self.reranker = reranker

    async def retrieve(
        self,
        query: str | None,
        history: list[ChatTurn] | None = None,
        page: int | None = None,
    ) -> RetrievalResult:
        """
        Run retrieval for one user message.

        Args:
            query: Raw user text
            history: Recent turns, only used to resolve pronouns
            page: Explicit catalog page; overrides "page N" phrasing

        Returns:
            RetrievalResult: Ranked documents, context and pagination state

        Raises:
            MalformedQueryError: If the query is empty
            AllStrategiesFailedError: If no strategy could search the store
        """
        if query is None or not query.strip():
            raise MalformedQueryError()

        query = query.strip()
        history = history or []

        search_text = query
        if self.rewriter is not None:
            search_text = await self.rewriter.resolve(query, history)

        classification = await self.classifier.classify(search_text)

        if not classification.needs_retrieval:
            logger.info(f"{__name__}:retrieve - No retrieval needed for {preview(query)!r}")
            return RetrievalResult(
                strategy=classification.query_type.value,
                classification=classification,
                search_query=search_text,
            )

        if page is not None:
            classification.requested_page = max(1, page)

        return await self._run(search_text, classification)

    async def catalog_page(
        self,
        page: int = 1,
        content_filter: ContentFilter = ContentFilter.ALL,
        page_size: int | None = None,
    ) -> RetrievalResult:
        """
        Catalog listing without classification.

        Args:
            page: 1-based page
            content_filter: books, videos or all
            page_size: Page size override

        Returns:
            RetrievalResult: Alphabetical catalog page
        """
        classification = QueryClassification(
            query_type=QueryType.CATALOG_BROWSE,
            confidence=1.0,
            content_filter=content_filter,
            requested_page=max(1, page),
            requested_count=page_size,
            reasoning="catalog endpoint",
        )
        return await self._run("catalog", classification)

    async def _rerank(
        self,
        search_text: str,
        ordered: list[LogicalDocument],
        query_type: QueryType,
    ) -> list[LogicalDocument]:
        # Re-scored pool and tail are on different scales; only the pool is re-sorted
        pool_size = self.reranker.pool_size
        rescored = await self.reranker.rerank(search_text, ordered)
        return self.ranker.order(rescored[:pool_size], query_type) + rescored[pool_size:]

    async def _run(self, search_text: str, classification: QueryClassification) -> RetrievalResult:
        query_type = classification.query_type
        plan = build_plan(search_text, classification, self.semantic_caps)
        outcome = await self.retriever.retrieve(plan)

        documents = list(self.aggregator.aggregate(outcome.candidates).values())
        documents = apply_content_filter(documents, classification.content_filter)
        ordered = self.ranker.order(documents, query_type)

        if self.reranker is not None and not query_type.is_catalog and ordered:
            ordered = await self._rerank(search_text, ordered, query_type)

        page_size = None
        if query_type.is_catalog and classification.requested_count:
            page_size = min(classification.requested_count, MAX_REQUESTED_PAGE_SIZE)

        selected, page_info = self.ranker.paginate(
            ordered,
            query_type,
            page=classification.requested_page,
            page_size=page_size,
        )

        warning = page_info.warning
        if outcome.failed or outcome.timed_out:
            degraded = ", ".join(s.value for s in outcome.failed + outcome.timed_out)
            note = f"Some search methods were unavailable ({degraded}); results may be incomplete."
            warning = f"{warning} {note}" if warning else note
            page_info = page_info.model_copy(update={"warning": warning})

        overview = ""
        if query_type.is_catalog and page_info.page == 1:
            overview = collection_overview(ordered)

        context = self.formatter.format(selected, page_info, query_type, overview=overview)

        logger.info(
            f"{__name__}:_run - {query_type.value}: {len(selected)} of {page_info.total_available} documents "
            f"(page {page_info.page}/{page_info.total_pages}, has_more={page_info.has_more})"
        )
        return RetrievalResult(
            documents=selected,
            context=context,
            total_available=page_info.total_available,
            strategy=query_type.value,
            strategies_run=outcome.strategies_run,
            warning=warning,
            has_more=page_info.has_more,
            remaining=page_info.remaining,
            page=page_info.page,
            total_pages=page_info.total_pages,
            classification=classification,
            search_query=search_text,
        )
