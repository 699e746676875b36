"""
Chunk ORM model.

Maps the chunk table: text content, free-text metadata and a pgvector
embedding column. The retrieval pipeline only reads from it.

Dependencies: sqlalchemy, pgvector, reading_room.boundary.db.base
System role: Chunk persistence schema
"""

from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from reading_room.boundary.db.base import Base
from reading_room.configs import get_settings

_settings = get_settings()


class ChunkModel(Base):
    """
    Chunk ORM model.

    Attributes:
        id: Stable chunk identifier assigned at ingestion
        content: Chunk text
        embedding: Fixed-dimension vector, null for unprocessed rows
        title, author, topic, genre, tags, difficulty, doc_type: Free-text metadata
        chunk_index: Ordinal position within the parent document
        total_chunks: Sibling count within the parent document
        created_at: Ingestion timestamp
    """

    __tablename__ = _settings.database.chunk_table

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    embedding: Mapped[list[float] | None] = mapped_column(
        Vector(_settings.llm.embedding_dimension),
        nullable=True,
    )

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str | None] = mapped_column(Text, nullable=True)
    topic: Mapped[str | None] = mapped_column(Text, nullable=True)
    genre: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(50), nullable=True)
    doc_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    chunk_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_chunks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<ChunkModel(id={self.id}, title={self.title!r}, chunk={self.chunk_index}/{self.total_chunks})>"
