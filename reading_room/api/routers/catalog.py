"""Catalog API endpoints.

Routes:
- GET /catalog - Alphabetical catalog page

Dependencies: reading_room.application.services.chat_service
System role: Catalog browsing HTTP API
"""

from fastapi import APIRouter, Depends, Query

from reading_room.api.deps import get_chat_service
from reading_room.api.routers.router_utils import handle_retrieval_errors
from reading_room.application.services.chat_service import ChatService
from reading_room.models.chat import CatalogResponse
from reading_room.models.retrieval import ContentFilter

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=CatalogResponse)
@handle_retrieval_errors
async def get_catalog(
    page: int = Query(default=1, ge=1, description="1-based page"),
    content_filter: ContentFilter = Query(default=ContentFilter.ALL, description="books, videos or all"),
    chat_service: ChatService = Depends(get_chat_service),
) -> CatalogResponse:
    """Return one page of the document catalog, sorted by title."""
    return await chat_service.get_catalog(page=page, content_filter=content_filter)
