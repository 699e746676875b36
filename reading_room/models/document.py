"""
Logical document model.

A logical document is one unique work assembled from the chunks a single
retrieval pass surfaced. It is rebuilt on every request and never persisted.

Dependencies: pydantic
System role: Document-level retrieval results
"""

from pydantic import BaseModel, Field

from reading_room.models.retrieval import MatchType, Provenance, StrategyName


class LogicalDocument(BaseModel):
    """
    Deduplicated aggregate of the chunks that share a (title, author) key.

    Attributes:
        key: lower(title) + "-" + lower(author or "unknown")
        content: Content of the highest-scoring contributing chunk
        relevance_score: Score of that chunk
        match_type: Match type of that chunk
        chunk_ids: Distinct contributing chunk ids seen in this pass
        strategies: Strategies that surfaced at least one contributing chunk
    """

    key: str
    title: str
    author: str | None = None
    topic: str | None = None
    genre: str | None = None
    tags: str | None = None
    difficulty: str | None = None
    doc_type: str | None = None
    content: str = ""
    relevance_score: float = 0.0
    match_type: MatchType
    total_chunks: int | None = None
    chunk_ids: set[str] = Field(default_factory=set)
    strategies: set[StrategyName] = Field(default_factory=set)

    @property
    def chunks_available(self) -> int:
        return len(self.chunk_ids)

    @property
    def provenance(self) -> Provenance:
        if len(self.strategies) > 1:
            return Provenance.HYBRID
        if not self.strategies:
            return Provenance.CATALOG_SCAN
        return Provenance.for_strategy(next(iter(self.strategies)))

    @property
    def is_video(self) -> bool:
        return "video" in (self.doc_type or "").lower()
