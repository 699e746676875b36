"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: reading_room.boundary.db
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from reading_room.api.deps import get_chunk_store
from reading_room.core.exceptions import ChunkStoreError

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(chunk_store=Depends(get_chunk_store)) -> HealthResponse:
    """Chunk store health check. Runs a row count."""
    try:
        rows = await chunk_store.count()
    except ChunkStoreError as e:
        logger.error(f"{__name__}:health_check_db - {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")
    return HealthResponse(status="healthy", message=f"Database connection OK ({rows} chunks)")
