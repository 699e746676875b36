"""
Query classifier.

Chooses the retrieval intent for a query with ordered keyword rules,
resolves the content-type filter, pagination and difficulty hints, and
optionally asks the completion service for entities and topics.

Dependencies: langchain_core (prompt templates), reading_room.boundary.llm
System role: First stage of the retrieval pipeline
"""

import json
import logging
import re

from reading_room.core.exceptions import ClassificationFallbackError, GenerationError
from reading_room.core.retrieval import text_utils
from reading_room.core.retrieval.prompts import QUERY_ANALYSIS_PROMPT
from reading_room.models.retrieval import ContentFilter, QueryClassification, QueryType

logger = logging.getLogger(__name__)

_CATALOG_PATTERNS = (
    re.compile(
        r"\b(all|every|complete|entire|full)\s+(of\s+)?(the\s+|your\s+|my\s+)?"
        r"(books?|documents?|content|items|titles|videos?|talks?)\b",
        re.I,
    ),
    re.compile(r"\b(list|show)\s+(me\s+)?(the\s+|your\s+)?(books?|documents?|titles|videos?)\b", re.I),
    re.compile(
        r"\b(what|which)\s+(books?|documents?|content|titles|videos?)\s+"
        r"(do\s+you\s+have|are\s+(available|there)|have\s+you\s+got)\b",
        re.I,
    ),
    re.compile(r"\b(catalog|catalogue|inventory)\b", re.I),
    re.compile(r"\b\d+\s+(books?|documents?|items|titles|videos?)\b", re.I),
)

_RECOMMENDATION_PATTERNS = (
    re.compile(
        r"\b(recommend\w*|suggest\w*|best|top|should\s+i\s+(read|watch)|what\s+to\s+(read|watch)|"
        r"beginners?|starter|reading\s+list)\b",
        re.I,
    ),
)

_SPECIFIC_PATTERNS = (
    re.compile(r"\b(about|on|regarding)\s+\w+", re.I),
    re.compile(r"\b(find|search|looking\s+for|look\s+up)\b", re.I),
)

_QUESTION_PATTERNS = (
    re.compile(
        r"\b(what\s+is|what\s+are|who\s+is|who\s+was|explain|define|how\s+does|how\s+do|"
        r"why\s+does|why\s+do|tell\s+me\s+about)\b",
        re.I,
    ),
)

_BOOK_RE = re.compile(r"\b(books?|documents?)\b", re.I)
_VIDEO_RE = re.compile(r"\b(videos?|talks?|presentations?)\b", re.I)

_PAGE_RE = re.compile(r"\bpage\s+(\d+)\b", re.I)
_MORE_COUNT_RE = re.compile(r"\b(next|another|more)\s+(\d+)\b", re.I)
_BARE_COUNT_RE = re.compile(r"\b(\d+)\s+(books?|documents?|items|titles|videos?|recommendations?|suggestions?)\b", re.I)

_DIFFICULTY_PATTERNS = (
    ("beginner", re.compile(r"\b(beginners?|basic|introduction|intro|simple|starter)\b", re.I)),
    ("advanced", re.compile(r"\b(advanced|expert|complex|deep)\b", re.I)),
    ("intermediate", re.compile(r"\b(intermediate|moderate)\b", re.I)),
)


def resolve_content_filter(query: str) -> ContentFilter:
    """Books when only book vocabulary is present, videos for the reverse, else all."""
    mentions_books = bool(_BOOK_RE.search(query))
    mentions_videos = bool(_VIDEO_RE.search(query))
    if mentions_books and not mentions_videos:
        return ContentFilter.BOOKS
    if mentions_videos and not mentions_books:
        return ContentFilter.VIDEOS
    return ContentFilter.ALL


def extract_difficulty(query: str) -> str | None:
    for level, pattern in _DIFFICULTY_PATTERNS:
        if pattern.search(query):
            return level
    return None


def extract_pagination(query: str) -> tuple[int, int | None]:
    """
    Parse "page N" and count phrasing.

    "next/another/more N" without an explicit "page N" asks for the page
    after the first N, i.e. page 2 with N per page. Bare counts ("5 books")
    only set the page size.

    Returns:
        tuple[int, int | None]: (requested page, requested count)
    """
    page_match = _PAGE_RE.search(query)
    page = max(1, int(page_match.group(1))) if page_match else 1

    more_match = _MORE_COUNT_RE.search(query)
    if more_match:
        count = int(more_match.group(2))
        if count > 0:
            return (page if page_match else 2), count

    bare_match = _BARE_COUNT_RE.search(query)
    if bare_match and int(bare_match.group(1)) > 0:
        return page, int(bare_match.group(1))
    return page, None


def classify_rules(query: str) -> QueryClassification:
    """
    Keyword classification. Pure function of the query text.

    Rules are evaluated in order and the first match wins.

    Args:
        query: Raw (or pronoun-resolved) query text

    Returns:
        QueryClassification: Intent, confidence and extracted hints
    """
    page, count = extract_pagination(query)
    hints = {
        "content_filter": resolve_content_filter(query),
        "requested_page": page,
        "requested_count": count,
        "difficulty": extract_difficulty(query),
        "entities": text_utils.proper_noun_pairs(query),
    }

    if text_utils.is_greeting(query):
        return QueryClassification(
            query_type=QueryType.DIRECT_QUESTION,
            confidence=0.90,
            needs_retrieval=False,
            reasoning="greeting or small talk",
            **hints,
        )

    if any(p.search(query) for p in _CATALOG_PATTERNS):
        return QueryClassification(
            query_type=QueryType.CATALOG_BROWSE,
            confidence=0.95,
            reasoning="broad listing phrasing",
            **hints,
        )

    if any(p.search(query) for p in _RECOMMENDATION_PATTERNS):
        return QueryClassification(
            query_type=QueryType.RECOMMENDATION,
            confidence=0.90,
            reasoning="recommendation vocabulary",
            **hints,
        )

    if any(p.search(query) for p in _SPECIFIC_PATTERNS):
        return QueryClassification(
            query_type=QueryType.SPECIFIC_SEARCH,
            confidence=0.85,
            reasoning="targeted subject or search verb",
            **hints,
        )

    if any(p.search(query) for p in _QUESTION_PATTERNS) or query.rstrip().endswith("?"):
        if hints["entities"]:
            return QueryClassification(
                query_type=QueryType.HYBRID,
                confidence=0.80,
                reasoning="question naming a specific entity",
                **hints,
            )
        return QueryClassification(
            query_type=QueryType.DIRECT_QUESTION,
            confidence=0.80,
            reasoning="general question",
            **hints,
        )

    return QueryClassification(
        query_type=QueryType.HYBRID,
        confidence=0.60,
        reasoning="default",
        **hints,
    )


def parse_analysis(raw: str) -> tuple[list[str], list[str]]:
    """
    Parse the JSON reply of the query analysis prompt.

    Raises:
        ClassificationFallbackError: If the reply is not the expected object
    """
    text = raw.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise ClassificationFallbackError("Query analysis reply has no JSON object")
    try:
        payload = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise ClassificationFallbackError("Query analysis reply is not valid JSON") from e
    if not isinstance(payload, dict):
        raise ClassificationFallbackError("Query analysis reply is not an object")

    def _strings(value) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(v).strip() for v in value if str(v).strip()]

    return _strings(payload.get("entities")), _strings(payload.get("topics"))[:3]


class QueryClassifier:
    """
    Rule-based classifier with optional completion-assisted analysis.

    The analysis step only enriches entities and topics. Any failure in it
    falls back to the keyword result.
    """

    def __init__(self, completion_service=None, enable_analysis: bool = True) -> None:
        """
        Initialize classifier.

        Args:
            completion_service: Object with async complete(messages, model=None, max_tokens=None)
            enable_analysis: Ask the completion service for entities and topics
        """
        self.completion_service = completion_service
        self.enable_analysis = enable_analysis and completion_service is not None

    async def classify(self, query: str) -> QueryClassification:
        """
        Classify a query.

        Args:
            query: Query text (pronouns already resolved)

        Returns:
            QueryClassification: Never raises for well-formed text
        """
        classification = classify_rules(query)

        if not classification.topics:
            classification.topics = text_utils.search_terms(query, max_terms=3)

        if classification.needs_retrieval and self.enable_analysis and not classification.query_type.is_catalog:
            try:
                entities, topics = await self._analyze(query)
            except ClassificationFallbackError as e:
                logger.warning(f"{__name__}:classify - Query analysis fell back to keywords: {e.message}")
            else:
                merged = list(dict.fromkeys(classification.entities + entities))
                classification.entities = merged
                if topics:
                    classification.topics = topics
                if entities:
                    classification.confidence = min(1.0, classification.confidence + 0.05)

        logger.info(
            f"{__name__}:classify - {classification.query_type.value} "
            f"(confidence={classification.confidence:.2f}, filter={classification.content_filter.value}, "
            f"reason={classification.reasoning})"
        )
        return classification

    async def _analyze(self, query: str) -> tuple[list[str], list[str]]:
        messages = QUERY_ANALYSIS_PROMPT.format_messages(question=query)
        try:
            raw = await self.completion_service.complete(messages, max_tokens=200)
        except GenerationError as e:
            raise ClassificationFallbackError("Query analysis call failed", details=e.details) from e
        return parse_analysis(raw)
