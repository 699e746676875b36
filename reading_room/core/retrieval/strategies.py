"""
Retrieval strategies.

Each strategy turns a search plan into chunk candidates tagged with a
match type and a provisional score. Candidates are appended to a shared
sink as they arrive so that a strategy abandoned on timeout still leaves
its completed lookups behind.

Dependencies: asyncio, reading_room.boundary (chunk store, embedding service)
System role: Chunk-level candidate generation
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from reading_room.core.exceptions import ChunkStoreError, EmbeddingError, StrategyUnavailableError
from reading_room.models.chunk import ScoredChunk
from reading_room.models.retrieval import MatchType, QueryClassification, StrategyName

logger = logging.getLogger(__name__)

# Provisional score of a single-field metadata hit
FIELD_WEIGHTS: dict[str, tuple[MatchType, float]] = {
    "title": (MatchType.TITLE, 0.95),
    "author": (MatchType.AUTHOR, 0.90),
    "topic": (MatchType.TOPIC, 0.85),
    "genre": (MatchType.GENRE, 0.85),
    "tags": (MatchType.TAGS, 0.80),
    "doc_type": (MatchType.DOC_TYPE, 0.75),
}

AUTHOR_FULL_NAME_SCORE = 0.95


class SearchPlan(BaseModel):
    """Everything the strategies need for one request."""

    search_text: str = Field(description="Text to embed for semantic search")
    classification: QueryClassification
    terms: list[str] = Field(default_factory=list, description="Metadata search terms")
    names: list[str] = Field(default_factory=list, description="Candidate author full names")
    semantic_cap: int = 20


class RetrievalStrategy(ABC):
    """Base class for strategies run by the multi-strategy retriever."""

    name: StrategyName

    @abstractmethod
    async def run(self, plan: SearchPlan, sink: list[ScoredChunk]) -> None:
        """
        Append candidates for the plan to sink.

        Raises:
            StrategyUnavailableError: If the backing call fails
        """


class SemanticStrategy(RetrievalStrategy):
    """Nearest-neighbour search over chunk embeddings."""

    name = StrategyName.SEMANTIC

    def __init__(self, chunk_store, embedding_service, threshold: float = 0.1) -> None:
        self.chunk_store = chunk_store
        self.embedding_service = embedding_service
        self.threshold = threshold

    async def run(self, plan: SearchPlan, sink: list[ScoredChunk]) -> None:
        try:
            embedding = await self.embedding_service.embed(plan.search_text)
            hits = await self.chunk_store.vector_search(embedding, self.threshold, plan.semantic_cap)
        except (EmbeddingError, ChunkStoreError) as e:
            raise StrategyUnavailableError(self.name.value, e.message) from e

        sink.extend(
            ScoredChunk(chunk=chunk, score=similarity, match_type=MatchType.VECTOR, strategy=self.name)
            for chunk, similarity in hits
        )
        logger.info(f"{__name__}:SemanticStrategy.run - {len(hits)} chunks (cap={plan.semantic_cap})")


class MetadataStrategy(RetrievalStrategy):
    """
    Case-insensitive substring search per term and field.

    Every (term, field) pair is its own lookup. Lookups run concurrently,
    bounded by a semaphore shared across the request.
    """

    name = StrategyName.METADATA

    def __init__(self, chunk_store, field_limit: int = 2, concurrency: int = 8) -> None:
        self.chunk_store = chunk_store
        self.field_limit = field_limit
        self.concurrency = concurrency

    async def run(self, plan: SearchPlan, sink: list[ScoredChunk]) -> None:
        if not plan.terms:
            logger.info(f"{__name__}:MetadataStrategy.run - No search terms, skipping")
            return

        semaphore = asyncio.Semaphore(self.concurrency)

        async def lookup(term: str, field: str) -> int:
            match_type, weight = FIELD_WEIGHTS[field]
            async with semaphore:
                chunks = await self.chunk_store.filter_search({field: term}, limit=self.field_limit)
            sink.extend(
                ScoredChunk(chunk=chunk, score=weight, match_type=match_type, strategy=self.name)
                for chunk in chunks
            )
            return len(chunks)

        lookups = [(term, field) for term in plan.terms for field in FIELD_WEIGHTS]
        results = await asyncio.gather(
            *(lookup(term, field) for term, field in lookups),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, ChunkStoreError):
                raise failure
        if failures and len(failures) == len(results):
            raise StrategyUnavailableError(self.name.value, failures[0].message)
        if failures:
            logger.warning(
                f"{__name__}:MetadataStrategy.run - {len(failures)}/{len(results)} field lookups failed"
            )

        found = sum(r for r in results if isinstance(r, int))
        logger.info(f"{__name__}:MetadataStrategy.run - {found} chunks from {len(lookups)} lookups")


class EntityNameStrategy(RetrievalStrategy):
    """Search the author field for candidate full names."""

    name = StrategyName.ENTITY_NAME

    def __init__(self, chunk_store, field_limit: int = 3) -> None:
        self.chunk_store = chunk_store
        self.field_limit = field_limit

    async def run(self, plan: SearchPlan, sink: list[ScoredChunk]) -> None:
        if not plan.names:
            return

        for name in plan.names:
            try:
                chunks = await self.chunk_store.filter_search({"author": name}, limit=self.field_limit)
            except ChunkStoreError as e:
                raise StrategyUnavailableError(self.name.value, e.message) from e
            sink.extend(
                ScoredChunk(
                    chunk=chunk,
                    score=AUTHOR_FULL_NAME_SCORE,
                    match_type=MatchType.AUTHOR_FULL_NAME,
                    strategy=self.name,
                )
                for chunk in chunks
            )
            if chunks:
                logger.info(f"{__name__}:EntityNameStrategy.run - {len(chunks)} chunks for author {name!r}")


class CatalogScanStrategy(RetrievalStrategy):
    """Whole chunk table ordered by title. No similarity scoring."""

    name = StrategyName.CATALOG_SCAN

    def __init__(self, chunk_store) -> None:
        self.chunk_store = chunk_store

    async def run(self, plan: SearchPlan, sink: list[ScoredChunk]) -> None:
        try:
            chunks = await self.chunk_store.scan_all(order_by="title")
        except ChunkStoreError as e:
            raise StrategyUnavailableError(self.name.value, e.message) from e

        sink.extend(
            ScoredChunk(chunk=chunk, score=0.0, match_type=MatchType.CATALOG_SCAN, strategy=self.name)
            for chunk in chunks
        )
