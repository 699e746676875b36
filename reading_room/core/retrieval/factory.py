"""
Pipeline assembly.

Wires strategies, retriever, classifier and the optional completion-assisted
steps from retrieval settings.

Dependencies: reading_room.configs.retrieval
System role: Composition root for the retrieval pipeline
"""

from reading_room.configs.retrieval import RetrievalSettings
from reading_room.core.retrieval.aggregation import DocumentAggregator
from reading_room.core.retrieval.classifier import QueryClassifier
from reading_room.core.retrieval.formatter import ContextFormatter
from reading_room.core.retrieval.pipeline import RetrievalPipeline
from reading_room.core.retrieval.query_rewriter import QueryRewriter
from reading_room.core.retrieval.ranking import RankingEngine
from reading_room.core.retrieval.reranker import LLMReranker
from reading_room.core.retrieval.retriever import MultiStrategyRetriever
from reading_room.core.retrieval.strategies import (
    CatalogScanStrategy,
    EntityNameStrategy,
    MetadataStrategy,
    SemanticStrategy,
)


def build_pipeline(
    settings: RetrievalSettings,
    chunk_store,
    embedding_service,
    completion_service=None,
) -> RetrievalPipeline:
    """
    Build a retrieval pipeline.

    Args:
        settings: Retrieval settings
        chunk_store: Object implementing vector_search, filter_search and scan_all
        embedding_service: Object with async embed(text)
        completion_service: Object with async complete(messages, ...); None disables
            query analysis, pronoun resolution and re-ranking

    Returns:
        RetrievalPipeline: Ready to serve requests
    """
    retriever = MultiStrategyRetriever(
        strategies=[
            SemanticStrategy(chunk_store, embedding_service, threshold=settings.similarity_threshold),
            MetadataStrategy(
                chunk_store,
                field_limit=settings.metadata_field_limit,
                concurrency=settings.metadata_concurrency,
            ),
            EntityNameStrategy(chunk_store, field_limit=settings.entity_field_limit),
            CatalogScanStrategy(chunk_store),
        ],
        timeout_seconds=settings.timeout_seconds,
    )

    rewriter = None
    reranker = None
    if completion_service is not None:
        if settings.enable_pronoun_resolution:
            rewriter = QueryRewriter(completion_service, history_window=settings.history_window)
        if settings.enable_rerank:
            reranker = LLMReranker(completion_service)

    return RetrievalPipeline(
        classifier=QueryClassifier(completion_service, enable_analysis=settings.enable_query_analysis),
        retriever=retriever,
        aggregator=DocumentAggregator(),
        ranker=RankingEngine(page_size=settings.catalog_page_size, top_n=settings.top_n),
        formatter=ContextFormatter(preview_length=settings.preview_length),
        semantic_caps=settings.semantic_caps,
        rewriter=rewriter,
        reranker=reranker,
    )
