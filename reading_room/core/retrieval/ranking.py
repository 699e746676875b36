"""
Ranking and pagination.

Catalog listings are alphabetical and paged; targeted intents are ordered
by relevance and cut to a single top-N slice.

Dependencies: reading_room.models
System role: Ordering and slicing stage of the retrieval pipeline
"""

import logging
import math

from reading_room.models.document import LogicalDocument
from reading_room.models.retrieval import ContentFilter, PageInfo, QueryType

logger = logging.getLogger(__name__)


def apply_content_filter(
    documents: list[LogicalDocument],
    content_filter: ContentFilter,
) -> list[LogicalDocument]:
    """Books drop documents whose doc_type mentions video; videos keep only those."""
    if content_filter is ContentFilter.BOOKS:
        return [d for d in documents if not d.is_video]
    if content_filter is ContentFilter.VIDEOS:
        return [d for d in documents if d.is_video]
    return list(documents)


def _catalog_key(document: LogicalDocument) -> tuple[str, str]:
    return (document.title.casefold(), (document.author or "").casefold())


def _relevance_key(document: LogicalDocument) -> tuple[float, int, int, str]:
    return (
        -document.relevance_score,
        -document.chunks_available,
        -document.provenance.priority,
        document.key,
    )


class RankingEngine:
    """
    Intent-dependent ordering and slicing.

    Attributes:
        page_size: Catalog page size
        top_n: Slice size for targeted intents
    """

    def __init__(self, page_size: int = 20, top_n: int = 8) -> None:
        self.page_size = page_size
        self.top_n = top_n

    def order(self, documents: list[LogicalDocument], query_type: QueryType) -> list[LogicalDocument]:
        """
        Sort documents for the intent.

        Catalog: case-insensitive title, then author. Others: score desc,
        chunks_available desc, provenance priority desc, then key.
        """
        if query_type.is_catalog:
            return sorted(documents, key=_catalog_key)
        return sorted(documents, key=_relevance_key)

    def paginate(
        self,
        ordered: list[LogicalDocument],
        query_type: QueryType,
        page: int = 1,
        page_size: int | None = None,
    ) -> tuple[list[LogicalDocument], PageInfo]:
        """
        Slice an ordered list.

        Args:
            ordered: Output of order()
            query_type: Intent; only catalog intents page
            page: 1-based page (values below 1 are treated as 1)
            page_size: Catalog page size override (bare counts such as "3 books")

        Returns:
            tuple[list[LogicalDocument], PageInfo]: The slice and its pagination state
        """
        total = len(ordered)

        if not query_type.is_catalog:
            selected = ordered[: self.top_n]
            remaining = total - len(selected)
            warning = None
            if remaining > 0:
                warning = (
                    f"Showing the top {len(selected)} of {total} matching documents; "
                    f"{remaining} more matched but are not included."
                )
            return selected, PageInfo(
                page=1,
                page_size=self.top_n,
                total_pages=1,
                total_available=total,
                has_more=remaining > 0,
                remaining=remaining,
                warning=warning,
            )

        size = page_size or self.page_size
        page = max(1, page)
        total_pages = max(1, math.ceil(total / size))
        start = (page - 1) * size
        selected = ordered[start:start + size]
        remaining = max(0, total - (start + len(selected)))

        warning = None
        if start >= total and total > 0:
            warning = f"Page {page} is past the end of the catalog, which has {total_pages} page(s)."
            remaining = 0
        elif remaining > 0:
            warning = (
                f"Showing documents {start + 1}-{start + len(selected)} of {total}. "
                f"{remaining} more available; ask for page {page + 1} to continue."
            )

        logger.debug(f"{__name__}:paginate - page {page}/{total_pages}, {len(selected)} of {total}")
        return selected, PageInfo(
            page=page,
            page_size=size,
            total_pages=total_pages,
            total_available=total,
            has_more=remaining > 0,
            remaining=remaining,
            warning=warning,
        )
