"""
Chunk store read adapter.

Read-only queries against the chunk table: nearest-neighbour search over
pgvector embeddings, case-insensitive substring filtering on metadata,
ordered full scans and row counts. Every call opens its own session so
concurrent retrieval strategies never share one.

Dependencies: sqlalchemy, pgvector, reading_room.boundary.db.models.chunk_model
System role: Chunk store boundary for the retrieval pipeline
"""

import logging
from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from reading_room.boundary.db.models.chunk_model import ChunkModel
from reading_room.core.exceptions import ChunkStoreError, ValidationError
from reading_room.models.chunk import Chunk

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "author", "topic", "genre", "tags", "difficulty", "doc_type")
ORDERABLE_FIELDS = METADATA_FIELDS + ("created_at", "chunk_index")


def _column(field: str, allowed: Sequence[str]):
    if field not in allowed:
        raise ValidationError(f"Unsupported chunk column: {field}", field=field)
    return getattr(ChunkModel, field)


def to_chunk(row: ChunkModel) -> Chunk:
    """Convert an ORM row to the domain chunk. Embeddings are not carried over."""
    return Chunk(
        id=str(row.id),
        content=row.content or "",
        title=row.title,
        author=row.author,
        topic=row.topic,
        genre=row.genre,
        tags=row.tags,
        difficulty=row.difficulty,
        doc_type=row.doc_type,
        chunk_index=row.chunk_index,
        total_chunks=row.total_chunks,
        created_at=row.created_at,
    )


class ChunkStore:
    """
    Read operations over the chunk table.

    Attributes:
        session_factory: async_sessionmaker bound to the chunk database
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self.session_factory = session_factory

    async def vector_search(
        self,
        embedding: list[float],
        threshold: float,
        limit: int,
    ) -> list[tuple[Chunk, float]]:
        """
        Nearest-neighbour search by cosine similarity.

        Args:
            embedding: Query vector
            threshold: Minimum similarity (1 - cosine distance)
            limit: Maximum rows returned

        Returns:
            list[tuple[Chunk, float]]: Chunks with similarity, best first.
                Rows without an embedding are never returned.

        Raises:
            ChunkStoreError: If the query fails
        """
        distance = ChunkModel.embedding.cosine_distance(embedding)
        stmt = (
            select(ChunkModel, distance.label("distance"))
            .where(ChunkModel.embedding.is_not(None))
            .where(distance <= 1 - threshold)
            .order_by(distance, ChunkModel.id)
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:vector_search - {type(e).__name__}: {e}")
            raise ChunkStoreError(
                "Vector search failed",
                operation="vector_search",
                details={"limit": limit},
            ) from e

        logger.debug(f"{__name__}:vector_search - {len(rows)} rows (threshold={threshold}, limit={limit})")
        return [(to_chunk(row), max(0.0, min(1.0, 1.0 - float(dist)))) for row, dist in rows]

    async def filter_search(
        self,
        field_patterns: dict[str, str],
        limit: int | None = None,
    ) -> list[Chunk]:
        """
        Case-insensitive substring match on metadata fields, combined with OR.

        Args:
            field_patterns: Mapping of metadata column name to substring
            limit: Maximum rows returned (None for all)

        Returns:
            list[Chunk]: Matching chunks ordered by id

        Raises:
            ValidationError: If a column is not a metadata field
            ChunkStoreError: If the query fails
        """
        if not field_patterns:
            return []

        clauses = [
            _column(field, METADATA_FIELDS).icontains(pattern, autoescape=True)
            for field, pattern in field_patterns.items()
        ]
        stmt = select(ChunkModel).where(or_(*clauses)).order_by(ChunkModel.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:filter_search - {type(e).__name__}: {e}")
            raise ChunkStoreError(
                "Filter search failed",
                operation="filter_search",
                details={"fields": list(field_patterns)},
            ) from e

        return [to_chunk(row) for row in rows]

    async def scan_all(self, order_by: str = "title", limit: int | None = None) -> list[Chunk]:
        """
        Read the whole chunk table ordered by one column.

        Args:
            order_by: Whitelisted column name
            limit: Optional row cap

        Returns:
            list[Chunk]: Every chunk, ordered by the column then id

        Raises:
            ValidationError: If order_by is not an orderable column
            ChunkStoreError: If the query fails
        """
        column = _column(order_by, ORDERABLE_FIELDS)
        stmt = select(ChunkModel).order_by(column, ChunkModel.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:scan_all - {type(e).__name__}: {e}")
            raise ChunkStoreError("Catalog scan failed", operation="scan_all") from e

        logger.info(f"{__name__}:scan_all - {len(rows)} rows ordered by {order_by}")
        return [to_chunk(row) for row in rows]

    async def count(self) -> int:
        """
        Count chunk rows.

        Returns:
            int: Total rows in the chunk table

        Raises:
            ChunkStoreError: If the query fails
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(func.count()).select_from(ChunkModel))
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:count - {type(e).__name__}: {e}")
            raise ChunkStoreError("Count failed", operation="count") from e
