"""
End-to-end tests for RetrievalPipeline over the in-memory chunk store.

Covers greeting short-circuit, deduplication, catalog pagination,
vector-only matches, degraded strategies, pronoun resolution and
idempotence.

System role: Verification of retrieval orchestration
"""

import pytest

from reading_room.configs.retrieval import RetrievalSettings
from reading_room.core.exceptions import AllStrategiesFailedError, MalformedQueryError
from reading_room.core.retrieval.factory import build_pipeline
from reading_room.models.retrieval import ChatTurn, ContentFilter, MatchType, QueryType

from tests.fakes import FakeChunkStore, FakeCompletionService, FakeEmbeddingService, build_chunk


def make_pipeline(store, embeddings=None, completion=None, **overrides):
    settings = RetrievalSettings(**overrides)
    return build_pipeline(settings, store, embeddings or FakeEmbeddingService(), completion)


class TestGreeting:
    """Greeting-only messages never touch the chunk store."""

    async def test_hello_should_make_no_store_calls(self) -> None:
        # Arrange
        store = FakeChunkStore(chunks=[build_chunk("a", "Anything")])
        embeddings = FakeEmbeddingService()
        pipeline = make_pipeline(store, embeddings)

        # Act
        result = await pipeline.retrieve("hello")

        # Assert
        assert store.calls == []
        assert embeddings.calls == []
        assert result.documents == []
        assert result.classification.needs_retrieval is False

    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_empty_query_should_be_rejected(self, query) -> None:
        pipeline = make_pipeline(FakeChunkStore())

        with pytest.raises(MalformedQueryError):
            await pipeline.retrieve(query)


class TestDeduplication:
    """Chunks of one work collapse into one document."""

    async def test_two_chunks_of_good_to_great_should_be_one_document(self) -> None:
        # Arrange
        store = FakeChunkStore(chunks=[
            build_chunk("g1", "Good to Great", "Jim Collins", chunk_index=1, total_chunks=3, doc_type="book"),
            build_chunk("g2", "Good to Great", "Jim Collins", chunk_index=2, total_chunks=3, doc_type="book"),
        ])
        pipeline = make_pipeline(store)

        # Act
        result = await pipeline.retrieve("Tell me about Good to Great")

        # Assert
        assert len(result.documents) == 1
        assert result.documents[0].title == "Good to Great"
        assert result.documents[0].chunks_available == 2
        assert result.total_available == 1


class TestCatalog:
    """Catalog listing and pagination."""

    async def test_show_me_all_books_should_return_first_page_of_20(self) -> None:
        # Arrange
        store = FakeChunkStore(chunks=[
            build_chunk(f"b{i:02d}", f"Book {i:02d}", f"Author {i}", doc_type="book") for i in range(25)
        ])
        pipeline = make_pipeline(store)

        # Act
        result = await pipeline.retrieve("show me all books")

        # Assert
        assert result.strategy == QueryType.CATALOG_BROWSE.value
        assert len(result.documents) == 20
        assert result.has_more is True
        assert result.remaining == 5
        assert result.total_available == 25
        assert store.operations() == ["scan_all"]

    async def test_books_filter_should_exclude_videos(self, catalog_chunks) -> None:
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks))

        result = await pipeline.retrieve("show me all books")

        assert result.total_available == 23
        assert all(not d.is_video for d in result.documents)

    async def test_pages_should_concatenate_without_gaps(self, catalog_chunks) -> None:
        """Page 1 and page 2 together are the full alphabetical catalog."""
        # Arrange
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks))

        # Act
        first = await pipeline.catalog_page(page=1)
        second = await pipeline.catalog_page(page=2)

        # Assert
        titles = [d.title for d in first.documents + second.documents]
        assert titles == [f"Title {chr(ord('A') + i)}" for i in range(25)]
        assert second.has_more is False
        assert "COLLECTION OVERVIEW" in first.context
        assert "COLLECTION OVERVIEW" not in second.context
        assert "21. Title U" in second.context

    async def test_explicit_page_should_override_text(self, catalog_chunks) -> None:
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks))

        result = await pipeline.retrieve("show me all the content", page=2)

        assert result.page == 2
        assert len(result.documents) == 5

    async def test_bare_count_should_set_page_size(self, catalog_chunks) -> None:
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks))

        result = await pipeline.retrieve("show me 5 books")

        assert len(result.documents) == 5
        assert result.remaining == 18

    async def test_next_n_should_continue_after_first_n(self) -> None:
        """'next 5' skips the first five titles instead of repeating them."""
        # Arrange
        store = FakeChunkStore(chunks=[
            build_chunk(f"b{i:02d}", f"Book {i:02d}", f"Author {i}", doc_type="book") for i in range(25)
        ])
        pipeline = make_pipeline(store)

        # Act
        first = await pipeline.retrieve("show me 5 books")
        following = await pipeline.retrieve("show me the next 5 books in the catalog")

        # Assert
        assert [d.title for d in first.documents] == [f"Book {i:02d}" for i in range(5)]
        assert [d.title for d in following.documents] == [f"Book {i:02d}" for i in range(5, 10)]
        assert following.page == 2
        assert following.remaining == 15
        assert "6. Book 05" in following.context

    async def test_videos_filter_on_catalog_page(self, catalog_chunks) -> None:
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks))

        result = await pipeline.catalog_page(content_filter=ContentFilter.VIDEOS)

        assert [d.title for d in result.documents] == ["Title D", "Title R"]


class TestTargetedSearch:
    """Targeted intents over semantic, metadata and entity-name strategies."""

    async def test_content_mention_should_surface_as_vector_match(self) -> None:
        """A chunk that only mentions the name in its body is a vector match, never an author match."""
        # Arrange
        store = FakeChunkStore(
            chunks=[
                build_chunk(
                    "i1",
                    "The Intelligent Investor",
                    "Benjamin Graham",
                    content="Warren Buffett calls this the best book on investing ever written.",
                    doc_type="book",
                )
            ],
            similarities={"i1": 0.8},
        )
        pipeline = make_pipeline(store)

        # Act
        result = await pipeline.retrieve("books about Warren Buffett")

        # Assert
        assert [d.title for d in result.documents] == ["The Intelligent Investor"]
        assert result.documents[0].match_type is MatchType.VECTOR
        assert result.documents[0].match_type is not MatchType.AUTHOR

    async def test_failed_strategy_should_degrade_with_warning(self, catalog_chunks) -> None:
        # Arrange
        store = FakeChunkStore(chunks=catalog_chunks, failing={"vector_search"})
        pipeline = make_pipeline(store)

        # Act
        result = await pipeline.retrieve("books about leadership")

        # Assert
        assert result.documents
        assert "semantic" in result.warning
        assert "unavailable" in result.warning

    async def test_all_strategies_failing_should_raise(self, catalog_chunks) -> None:
        store = FakeChunkStore(chunks=catalog_chunks, failing={"vector_search"})
        pipeline = make_pipeline(store)

        with pytest.raises(AllStrategiesFailedError):
            await pipeline.retrieve("what is leverage?")

    async def test_targeted_results_should_be_capped_at_top_n(self) -> None:
        """Direct questions see at most 10 semantic hits and return the top 8."""
        store = FakeChunkStore(
            chunks=[build_chunk(f"v{i:02d}", f"Work {i:02d}") for i in range(12)],
            similarities={f"v{i:02d}": 0.2 + i / 20 for i in range(12)},
        )
        pipeline = make_pipeline(store)

        result = await pipeline.retrieve("what is compounding?")

        assert len(result.documents) == 8
        assert result.total_available == 10
        assert result.has_more is True
        assert result.remaining == 2
        assert result.documents[0].title == "Work 11"

    async def test_pronoun_should_be_resolved_before_search(self) -> None:
        # Arrange
        store = FakeChunkStore(chunks=[
            build_chunk("b1", "Shareholder Letters", "Warren Buffett", doc_type="book"),
        ])
        completion = FakeCompletionService(replies=["books by Warren Buffett"])
        pipeline = make_pipeline(store, completion=completion, enable_query_analysis=False)
        history = [
            ChatTurn(role="user", content="Who wrote the shareholder letters?"),
            ChatTurn(role="assistant", content="Warren Buffett wrote them."),
        ]

        # Act
        result = await pipeline.retrieve("what else did he write?", history=history)

        # Assert
        assert result.search_query == "books by Warren Buffett"
        assert [d.title for d in result.documents] == ["Shareholder Letters"]
        assert result.documents[0].match_type is MatchType.AUTHOR_FULL_NAME

    async def test_same_query_should_give_same_result(self, catalog_chunks) -> None:
        """Two runs over an unchanged store give identical keys and context."""
        # Arrange
        similarities = {c.id: 0.3 + (int(c.id[1:]) % 7) / 10 for c in catalog_chunks if c.id.startswith("c")}
        pipeline = make_pipeline(FakeChunkStore(chunks=catalog_chunks, similarities=similarities))

        # Act
        first = await pipeline.retrieve("recommend something on leadership")
        second = await pipeline.retrieve("recommend something on leadership")

        # Assert
        assert [d.key for d in first.documents] == [d.key for d in second.documents]
        assert first.context == second.context
