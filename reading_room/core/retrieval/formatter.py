"""
Context formatter.

Renders the ranked documents into the bounded context block handed to the
completion service: count header, numbered entries, end marker and the
instructions that keep answers inside the listed documents.

Dependencies: reading_room.models
System role: Final stage of the retrieval pipeline
"""

from collections import Counter

from reading_room.core.retrieval.text_utils import truncate
from reading_room.models.document import LogicalDocument
from reading_room.models.retrieval import PageInfo, QueryType

CATALOG_END_MARKER = "=== END OF CATALOG ==="
RETRIEVED_END_MARKER = "=== END OF RETRIEVED DOCUMENTS ==="

CONTEXT_INSTRUCTIONS = """INSTRUCTIONS:
- Only use documents listed above.
- Never invent titles, authors or documents that are not listed.
- If the listed documents do not cover the question, say so."""


def collection_overview(documents: list[LogicalDocument], top: int = 3) -> str:
    """Most common genres and topics across the whole filtered catalog."""
    genres = Counter(d.genre.strip() for d in documents if d.genre and d.genre.strip())
    topics = Counter(d.topic.strip() for d in documents if d.topic and d.topic.strip())
    lines = []
    if genres:
        lines.append("Top genres: " + ", ".join(f"{name} ({count})" for name, count in genres.most_common(top)))
    if topics:
        lines.append("Top topics: " + ", ".join(f"{name} ({count})" for name, count in topics.most_common(top)))
    if not lines:
        return ""
    return "COLLECTION OVERVIEW:\n" + "\n".join(lines)


class ContextFormatter:
    """Render documents for the completion service."""

    def __init__(self, preview_length: int = 150) -> None:
        self.preview_length = preview_length

    def _entry(self, number: int, document: LogicalDocument, catalog: bool) -> str:
        lines = [
            f"{number}. {document.title}",
            f"   Author: {document.author or 'Unknown'}",
            f"   Type: {document.doc_type or 'Unknown'}",
        ]
        if document.topic or document.genre:
            lines.append(f"   Topic: {document.topic or '-'} | Genre: {document.genre or '-'}")
        if catalog:
            lines.append(f"   Preview: {truncate(' '.join(document.content.split()), self.preview_length)}")
        else:
            lines.append(
                f"   Relevance: {document.relevance_score:.2f} ({document.match_type.value}, "
                f"{document.chunks_available} chunk(s))"
            )
            lines.append(f"   Content: {document.content}")
        return "\n".join(lines)

    def format(
        self,
        documents: list[LogicalDocument],
        page_info: PageInfo,
        query_type: QueryType,
        overview: str = "",
    ) -> str:
        """
        Render the context block.

        Args:
            documents: The page or slice being returned
            page_info: Pagination state (total count, warning)
            query_type: Catalog intents get previews, others full content
            overview: Optional collection overview for catalog page 1

        Returns:
            str: Context text
        """
        catalog = query_type.is_catalog
        end_marker = CATALOG_END_MARKER if catalog else RETRIEVED_END_MARKER

        if not documents:
            body = "No documents in the collection matched this request."
            if page_info.warning:
                body = f"{body}\nNOTE: {page_info.warning}"
            return f"{body}\n{end_marker}\n\n{CONTEXT_INSTRUCTIONS}"

        if catalog:
            header = (
                f"AVAILABLE DOCUMENTS ({len(documents)} of {page_info.total_available} total, "
                f"page {page_info.page} of {page_info.total_pages}):"
            )
        else:
            header = f"RETRIEVED DOCUMENTS ({len(documents)} of {page_info.total_available} total):"

        start = (page_info.page - 1) * page_info.page_size if catalog else 0
        entries = [self._entry(start + i, d, catalog) for i, d in enumerate(documents, start=1)]

        sections = []
        if overview:
            sections.append(overview)
        sections.append(header)
        sections.append("\n\n".join(entries))
        sections.append(end_marker)
        if page_info.warning:
            sections.append(f"NOTE: {page_info.warning}")
        sections.append(CONTEXT_INSTRUCTIONS)
        return "\n\n".join(sections)
