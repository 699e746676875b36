"""Chat API endpoints.

Routes:
- POST /chat - Answer a message from retrieved documents

Dependencies: reading_room.application.services.chat_service
System role: Chat messaging HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from reading_room.api.deps import get_chat_service
from reading_room.api.routers.router_utils import handle_retrieval_errors
from reading_room.application.services.chat_service import ChatService
from reading_room.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
@handle_retrieval_errors
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a chat message.

    Flow:
    1. Resolve pronouns against chatHistory and classify the query
    2. Run the selected retrieval strategies and rank documents
    3. Generate an answer restricted to the retrieved documents

    Args:
        request: ChatRequest with message, chatHistory and optional page
        chat_service: Injected ChatService

    Returns:
        ChatResponse: Answer with sources and pagination state

    Raises:
        HTTPException(400): Empty message
        HTTPException(503): No documents could be searched
        HTTPException(500): Answer generation or internal failure
    """
    return await chat_service.process_chat(request)
