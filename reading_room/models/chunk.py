"""
Chunk domain models.

A chunk is the atomic retrievable unit read from the chunk store;
a scored chunk is a chunk surfaced by one retrieval strategy.

Dependencies: pydantic
System role: Chunk-level data structures
"""

from datetime import datetime

from pydantic import BaseModel, Field

from reading_room.models.retrieval import MatchType, StrategyName


class Chunk(BaseModel):
    """Document chunk as stored in the chunk table."""

    id: str = Field(description="Stable chunk identifier")
    content: str = Field(default="", description="Chunk text content")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
    title: str | None = None
    author: str | None = None
    topic: str | None = None
    genre: str | None = None
    tags: str | None = None
    difficulty: str | None = None
    doc_type: str | None = None
    chunk_index: int | None = None
    total_chunks: int | None = None
    created_at: datetime | None = None

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())


class ScoredChunk(BaseModel):
    """A chunk candidate tagged with how and by which strategy it matched."""

    chunk: Chunk
    score: float = Field(description="Provisional similarity or field weight")
    match_type: MatchType
    strategy: StrategyName
