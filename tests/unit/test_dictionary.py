"""
Tests for dictionary oracles.

SpellCheckerOracle tests use the real pyspellchecker English dictionary.
"""

import pytest

from docmend.ocr.dictionary import (
    COMMON_WORDS,
    SUGGESTION_POOL,
    DictionaryOracle,
    FallbackOracle,
    SpellCheckerOracle,
    create_oracle,
    edit_distance,
)


class TestEditDistance:
    """Tests for the transposition-aware edit distance."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("the", "the", 0),
            ("tbe", "the", 1),
        ],
    )
    def test_distances(self, a, b, expected):
        """Known distances."""
        assert edit_distance(a, b) == expected

    def test_symmetric(self):
        """Distance does not depend on argument order."""
        assert edit_distance("flaw", "lawn") == edit_distance("lawn", "flaw")

    def test_adjacent_swap_is_one_edit(self):
        """Swapped neighbouring letters cost one edit."""
        assert edit_distance("wrold", "world") == 1
        assert edit_distance("teh", "the") == 1


class TestFallbackOracle:
    """Tests for the word-list oracle."""

    def test_common_words_are_valid(self):
        """Words in the fixed list are not misspelled, in any case."""
        oracle = FallbackOracle()
        assert not oracle.is_misspelled("the")
        assert not oracle.is_misspelled("Because")

    def test_unknown_word_is_misspelled(self):
        """Anything outside the list is misspelled."""
        assert FallbackOracle().is_misspelled("tbe")

    def test_words_without_letters_are_not_misspelled(self):
        """Numbers are never flagged."""
        assert not FallbackOracle().is_misspelled("1984")

    def test_suggestions_within_distance(self):
        """Suggestions come from the pool within distance 2."""
        assert FallbackOracle().suggest("tbe") == ["the"]
        suggestions = FallbackOracle().suggest("thet")
        assert suggestions[:2] == ["the", "that"]
        assert all(edit_distance("thet", s) <= 2 for s in suggestions)

    def test_nearest_first_then_pool_order(self):
        """Nearest suggestions first; equal distances keep the pool order."""
        suggestions = FallbackOracle().suggest("xot")
        assert suggestions == ["not", "for", "you", "but"]

    def test_no_suggestions_for_distant_words(self):
        """Words far from every pool entry get no suggestions."""
        assert FallbackOracle().suggest("zzzzzzzz") == []

    def test_constants(self):
        """Word list and pool have the documented sizes."""
        assert 90 <= len(COMMON_WORDS) <= 110
        assert len(SUGGESTION_POOL) == 10

    def test_satisfies_protocol(self):
        """FallbackOracle implements DictionaryOracle."""
        assert isinstance(FallbackOracle(), DictionaryOracle)


class TestSpellCheckerOracle:
    """Tests for the pyspellchecker-backed oracle."""

    @pytest.fixture(scope="class")
    def oracle(self):
        return SpellCheckerOracle()

    def test_known_word(self, oracle):
        """Dictionary words are not misspelled, whatever their case."""
        assert not oracle.is_misspelled("world")
        assert not oracle.is_misspelled("World")

    def test_misspelled_word(self, oracle):
        """Transposed letters are flagged."""
        assert oracle.is_misspelled("wrold")

    def test_top_suggestion(self, oracle):
        """The library's correction comes first."""
        assert oracle.suggest("wrold")[0] == "world"

    def test_suggestions_exclude_word(self, oracle):
        """The queried word is never suggested back."""
        assert "wrold" not in oracle.suggest("wrold")

    def test_suggestions_are_deterministic(self, oracle):
        """Repeated queries give the same order."""
        assert oracle.suggest("teh") == oracle.suggest("teh")

    def test_numbers_are_not_misspelled(self, oracle):
        """Tokens without letters are never misspelled."""
        assert not oracle.is_misspelled("2024")

    def test_satisfies_protocol(self, oracle):
        """SpellCheckerOracle implements DictionaryOracle."""
        assert isinstance(oracle, DictionaryOracle)


class TestCreateOracle:
    """Tests for oracle construction."""

    def test_english(self):
        """Recognition language codes map to pyspellchecker dictionaries."""
        assert isinstance(create_oracle("eng"), SpellCheckerOracle)

    def test_unknown_language_falls_back(self, caplog):
        """An unavailable dictionary degrades to the fallback oracle."""
        with caplog.at_level("WARNING", logger="docmend.ocr.dictionary"):
            oracle = create_oracle("xx")
        assert isinstance(oracle, FallbackOracle)
        assert "fallback" in caplog.text
