"""
Chat domain models and schemas.

Request/response schemas for the chat and catalog endpoints.
Wire format uses camelCase keys.

Dependencies: pydantic
System role: Chat API contracts
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from reading_room.models.retrieval import ChatTurn


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = Field(default="", description="User question or message")
    chat_history: list[ChatTurn] = Field(
        default_factory=list,
        alias="chatHistory",
        description="Recent turns, used only to resolve pronouns",
    )
    page: int | None = Field(default=None, description="Catalog page to return")


class SourceDocument(BaseModel):
    """One document cited in a response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    author: str | None = None
    doc_type: str | None = None
    topic: str | None = None
    genre: str | None = None
    difficulty: str | None = None
    snippet: str = Field(default="", description="Leading slice of the representative content")
    relevance_score: float = 0.0
    match_type: str
    provenance: str
    chunks_available: int = 0


class ChatResponse(BaseModel):
    """Response schema for chat messages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    response: str
    sources: list[SourceDocument] = Field(default_factory=list)
    documents_found: int = 0
    total_documents_available: int = 0
    retrieval_method: str
    warning: str | None = None
    has_more: bool = False
    remaining: int = 0
    query_type: str
    confidence: float = 0.0


class CatalogResponse(BaseModel):
    """Response schema for catalog pages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    documents: list[SourceDocument] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_documents_available: int = 0
    has_more: bool = False
    remaining: int = 0
    content_filter: str = "all"
    warning: str | None = None
