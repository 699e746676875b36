"""
Aggregation and deduplication of chunk candidates.

Merges chunk-level hits from every strategy into one logical document per
case-insensitive (title, author) key. Untitled chunks are dropped.

Dependencies: reading_room.models
System role: Chunk-to-document merge stage of the retrieval pipeline
"""

import logging

from reading_room.models.chunk import ScoredChunk
from reading_room.models.document import LogicalDocument

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "unknown"

_METADATA_FIELDS = ("author", "topic", "genre", "tags", "difficulty", "doc_type")


def document_key(title: str, author: str | None) -> str:
    """lower(title) + "-" + lower(author or "unknown"), surrounding whitespace ignored."""
    author_part = (author or "").strip() or UNKNOWN_AUTHOR
    return f"{title.strip().lower()}-{author_part.lower()}"


class DocumentAggregator:
    """
    Running merge of candidates into logical documents.

    First sighting seeds the document. Later sightings add their chunk id,
    fill metadata that is still empty, and replace the representative
    content only when their score is strictly higher.
    """

    def aggregate(self, candidates: list[ScoredChunk]) -> dict[str, LogicalDocument]:
        """
        Merge candidates.

        Args:
            candidates: Union of every strategy's candidates

        Returns:
            dict[str, LogicalDocument]: Documents keyed by identity key, in first-seen order
        """
        documents: dict[str, LogicalDocument] = {}
        skipped = 0

        for candidate in candidates:
            chunk = candidate.chunk
            if not chunk.has_title:
                skipped += 1
                continue

            key = document_key(chunk.title, chunk.author)
            document = documents.get(key)

            if document is None:
                documents[key] = LogicalDocument(
                    key=key,
                    title=chunk.title.strip(),
                    author=chunk.author,
                    topic=chunk.topic,
                    genre=chunk.genre,
                    tags=chunk.tags,
                    difficulty=chunk.difficulty,
                    doc_type=chunk.doc_type,
                    content=chunk.content,
                    relevance_score=candidate.score,
                    match_type=candidate.match_type,
                    total_chunks=chunk.total_chunks,
                    chunk_ids={chunk.id},
                    strategies={candidate.strategy},
                )
                continue

            document.chunk_ids.add(chunk.id)
            document.strategies.add(candidate.strategy)

            for field in _METADATA_FIELDS:
                if not getattr(document, field) and getattr(chunk, field):
                    setattr(document, field, getattr(chunk, field))
            if document.total_chunks is None and chunk.total_chunks is not None:
                document.total_chunks = chunk.total_chunks

            if candidate.score > document.relevance_score:
                document.content = chunk.content
                document.relevance_score = candidate.score
                document.match_type = candidate.match_type

        if skipped:
            logger.debug(f"{__name__}:aggregate - Skipped {skipped} untitled chunks")
        logger.info(f"{__name__}:aggregate - {len(candidates)} candidates -> {len(documents)} documents")
        return documents
