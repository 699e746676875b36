"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory chunk store, fake embedding and completion services,
chunk factories and an aiosqlite-backed chunk table.
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import pytest

from tests.fakes import (
    FakeChunkStore,
    FakeCompletionService,
    FakeEmbeddingService,
    build_chunk,
)


@pytest.fixture
def make_chunk():
    """Chunk factory."""
    return build_chunk


@pytest.fixture
def fake_store():
    """Empty in-memory chunk store."""
    return FakeChunkStore()


@pytest.fixture
def fake_embeddings():
    """Working fake embedding service."""
    return FakeEmbeddingService()


@pytest.fixture
def fake_completion():
    """Fake completion service with a default reply."""
    return FakeCompletionService()


@pytest.fixture
def catalog_chunks():
    """25 distinct titled works, two of them videos, plus one untitled chunk."""
    chunks = []
    for i in range(25):
        doc_type = "video" if i in (3, 17) else "book"
        chunks.append(
            build_chunk(
                id=f"c{i:02d}",
                title=f"Title {chr(ord('A') + i)}",
                author=f"Author {i}",
                content=f"Opening chapter of work {i}.",
                doc_type=doc_type,
                genre="Business" if i % 2 == 0 else "Finance",
                topic="Leadership" if i % 3 == 0 else "Investing",
                chunk_index=1,
                total_chunks=3,
            )
        )
    chunks.append(build_chunk(id="orphan", title="", author="Nobody", content="No title here."))
    return chunks


@pytest.fixture
async def sqlite_session_factory():
    """
    In-memory SQLite chunk table via aiosqlite.

    Yields:
        async_sessionmaker: Session factory bound to a fresh database
    """
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from reading_room.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
