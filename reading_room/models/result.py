"""
Retrieval result model.

Dependencies: pydantic
System role: Output contract of the retrieval pipeline
"""

from pydantic import BaseModel, Field

from reading_room.models.document import LogicalDocument
from reading_room.models.retrieval import QueryClassification, StrategyName


class RetrievalResult(BaseModel):
    """Pipeline output: ranked documents plus the rendered context block."""

    documents: list[LogicalDocument] = Field(default_factory=list)
    context: str = ""
    total_available: int = 0
    strategy: str = Field(description="Query type that drove retrieval")
    strategies_run: list[StrategyName] = Field(default_factory=list)
    warning: str | None = None
    has_more: bool = False
    remaining: int = 0
    page: int = 1
    total_pages: int = 1
    classification: QueryClassification
    search_query: str = Field(default="", description="Query text after pronoun resolution")

    @property
    def documents_found(self) -> int:
        return len(self.documents)
