"""
Retrieval domain models.

Enumerations and value objects shared by the classifier, the
multi-strategy retriever, aggregation, ranking and the formatter.

Dependencies: pydantic
System role: Retrieval pipeline contracts
"""

import enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class QueryType(str, enum.Enum):
    """
    Retrieval intent chosen by the query classifier.

    CATALOG_BROWSE: Listing of available works, paginated alphabetically
    SPECIFIC_SEARCH: Targeted lookup of a subject, person or title
    DIRECT_QUESTION: General question, light retrieval only
    RECOMMENDATION: Reading suggestions
    HYBRID: Question naming an entity, needs retrieved context plus knowledge
    """

    CATALOG_BROWSE = "catalog_browse"
    SPECIFIC_SEARCH = "specific_search"
    DIRECT_QUESTION = "direct_question"
    RECOMMENDATION = "recommendation"
    HYBRID = "hybrid"

    @property
    def is_catalog(self) -> bool:
        return self is QueryType.CATALOG_BROWSE


class ContentFilter(str, enum.Enum):
    """Content-type restriction resolved from the query text."""

    BOOKS = "books"
    VIDEOS = "videos"
    ALL = "all"


class StrategyName(str, enum.Enum):
    """Retrieval strategies the retriever can run."""

    SEMANTIC = "semantic"
    METADATA = "metadata"
    ENTITY_NAME = "entity_name"
    CATALOG_SCAN = "catalog_scan"


class Provenance(str, enum.Enum):
    """Which strategy family produced a document. Only used to break ties."""

    HYBRID = "hybrid"
    VECTOR = "vector"
    METADATA = "metadata"
    CATALOG_SCAN = "catalog_scan"

    @property
    def priority(self) -> int:
        return _PROVENANCE_PRIORITY[self]

    @classmethod
    def for_strategy(cls, strategy: StrategyName) -> "Provenance":
        if strategy is StrategyName.SEMANTIC:
            return cls.VECTOR
        if strategy is StrategyName.CATALOG_SCAN:
            return cls.CATALOG_SCAN
        return cls.METADATA


_PROVENANCE_PRIORITY = {
    Provenance.HYBRID: 3,
    Provenance.VECTOR: 2,
    Provenance.METADATA: 1,
    Provenance.CATALOG_SCAN: 0,
}


class MatchType(str, enum.Enum):
    """How a single chunk candidate was matched."""

    VECTOR = "vector"
    TITLE = "title"
    AUTHOR = "author"
    TOPIC = "topic"
    GENRE = "genre"
    TAGS = "tags"
    DOC_TYPE = "doc_type"
    AUTHOR_FULL_NAME = "author_full_name"
    CATALOG_SCAN = "catalog_scan"


class ChatTurn(BaseModel):
    """One prior conversation turn. Used only for pronoun resolution."""

    model_config = ConfigDict(populate_by_name=True)

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(
        default="",
        validation_alias=AliasChoices("content", "text"),
        description="Message text",
    )


class QueryClassification(BaseModel):
    """Classifier output consumed by the retriever and the ranking engine."""

    query_type: QueryType
    confidence: float = Field(ge=0.0, le=1.0)
    content_filter: ContentFilter = ContentFilter.ALL
    requested_page: int = Field(default=1, ge=1, description="Page parsed from 'page N' phrasing")
    requested_count: int | None = Field(
        default=None,
        description="Bare count such as '12 books' or 'next 5'",
    )
    difficulty: str | None = Field(default=None, description="beginner/intermediate/advanced hint")
    needs_retrieval: bool = Field(default=True, description="False for greetings and small talk")
    entities: list[str] = Field(default_factory=list, description="Named people or works")
    topics: list[str] = Field(default_factory=list, description="Subjects extracted from the query")
    reasoning: str = Field(default="", description="Which rule produced the decision")


class RetrievalQuery(BaseModel):
    """Request-scoped retrieval input."""

    text: str
    history: list[ChatTurn] = Field(default_factory=list)
    page: int | None = None
    content_filter: ContentFilter = ContentFilter.ALL


class PageInfo(BaseModel):
    """Pagination outcome for one ranked result set."""

    page: int = 1
    page_size: int
    total_pages: int = 1
    total_available: int = 0
    has_more: bool = False
    remaining: int = 0
    warning: str | None = None
