"""
Database boundary layer: ORM model, connection management and the chunk store adapter.

Exports:
  - Base: Declarative base
  - get_async_engine(), get_async_session_factory(): Async connection management
  - ChunkModel: Chunk table mapping
  - ChunkStore: Read operations used by the retrieval pipeline

Dependencies: sqlalchemy, pgvector, reading_room.configs
System role: Database adapter for the read-only chunk store
"""

from reading_room.boundary.db.base import Base
from reading_room.boundary.db.chunk_store import ChunkStore
from reading_room.boundary.db.connection import get_async_engine, get_async_session_factory
from reading_room.boundary.db.models.chunk_model import ChunkModel

__all__ = [
    "Base",
    "ChunkModel",
    "ChunkStore",
    "get_async_engine",
    "get_async_session_factory",
]
