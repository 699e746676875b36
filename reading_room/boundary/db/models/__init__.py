"""ORM models for the chunk store."""

from reading_room.boundary.db.models.chunk_model import ChunkModel

__all__ = ["ChunkModel"]
