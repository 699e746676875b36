"""
Test suite for query text heuristics.

System role: Verification of tokenization and name detection
"""

import pytest

from reading_room.core.retrieval.text_utils import (
    has_pronoun,
    is_greeting,
    name_pairs,
    normalize_text,
    proper_noun_pairs,
    search_terms,
    truncate,
)


class TestSearchTerms:
    """Test suite for search_terms()."""

    def test_should_drop_stop_words_and_short_tokens(self) -> None:
        assert search_terms("books by Warren Buffett about investing") == ["warren", "buffett", "investing"]

    def test_should_deduplicate_and_cap(self) -> None:
        terms = search_terms("alpha beta alpha gamma delta epsilon", max_terms=3)

        assert terms == ["alpha", "beta", "gamma"]

    def test_should_drop_numbers(self) -> None:
        assert search_terms("page 2 of 100 leadership") == ["page", "leadership"]


class TestNamePairs:
    """Test suite for name_pairs() and proper_noun_pairs()."""

    def test_lowercase_full_name_should_be_detected(self) -> None:
        assert name_pairs("books by warren buffett about investing") == ["warren buffett"]

    def test_stop_words_should_not_form_names(self) -> None:
        assert name_pairs("show me the books") == []

    def test_capitalised_span_should_be_detected(self) -> None:
        assert proper_noun_pairs("What did Warren Buffett say about moats?") == ["Warren Buffett"]

    def test_question_word_should_not_start_span(self) -> None:
        assert proper_noun_pairs("What Is leverage") == []

    @pytest.mark.parametrize(
        "query",
        [
            "Explain Warren Buffett's approach to risk?",
            "Did Warren Buffett write books?",
            "Has Warren Buffett changed his view?",
            "Describe Warren Buffett",
        ],
    )
    def test_name_after_capitalised_question_word_should_be_detected(self, query: str) -> None:
        """The leading question word is skipped, not paired with the first name."""
        assert proper_noun_pairs(query) == ["Warren Buffett"]

    def test_punctuation_should_break_span(self) -> None:
        assert proper_noun_pairs("Munger, Buffett and others") == []


class TestSmallHelpers:
    """Test suite for greeting, pronoun and truncation helpers."""

    def test_greetings(self) -> None:
        assert is_greeting("hello")
        assert is_greeting("Hello there!")
        assert is_greeting("thank you so much")
        assert not is_greeting("hello, can you find books on leadership")

    def test_pronouns(self) -> None:
        assert has_pronoun("what else did he write?")
        assert not has_pronoun("books on leadership")

    def test_normalize_text_should_collapse_whitespace(self) -> None:
        assert normalize_text("  show   me\tbooks?! ") == "show me books"

    def test_truncate(self) -> None:
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"
        assert truncate(None, 5) == ""
