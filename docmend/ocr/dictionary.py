"""
Dictionary oracles for spell correction.

An oracle answers two questions about a word: is it misspelled, and
what are the ordered candidate corrections. The SpellCorrector only
depends on this capability, so tests can inject a deterministic fake.

- SpellCheckerOracle: backed by pyspellchecker's frequency dictionary.
- FallbackOracle: small fixed word list plus edit-distance suggestions,
  used when the real dictionary cannot be initialised.

Oracles are built once per process and are read-only afterwards, so one
instance can be shared between threads converting different documents.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from spellchecker import SpellChecker

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# pyspellchecker language codes for the supported recognition languages
OCR_TO_DICTIONARY_LANGUAGE = {
    "eng": "en",
    "spa": "es",
    "fra": "fr",
    "deu": "de",
}

# Maximum distance for the fallback oracle's suggestions
FALLBACK_MAX_DISTANCE = 2
FALLBACK_MAX_SUGGESTIONS = 5

# Validity list for the fallback oracle
COMMON_WORDS = frozenset(
    {
        "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
        "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
        "this", "but", "his", "by", "from", "they", "she", "or", "an", "will",
        "my", "one", "all", "would", "there", "their", "what", "so", "up", "out",
        "if", "about", "who", "get", "which", "go", "me", "when", "make", "can",
        "like", "time", "no", "just", "him", "know", "take", "people", "into",
        "year", "your", "good", "some", "could", "them", "see", "other", "than",
        "then", "now", "look", "only", "come", "its", "over", "think", "also",
        "back", "after", "use", "two", "how", "our", "work", "first", "well",
        "way", "even", "new", "want", "because", "any", "these", "give", "day",
        "most", "us",
    }
)  # fmt: skip

# Suggestion pool for the fallback oracle, in preference order
SUGGESTION_POOL = ("the", "and", "that", "have", "for", "not", "with", "you", "this", "but")


# =============================================================================
# EDIT DISTANCE
# =============================================================================


def edit_distance(s1: str, s2: str) -> int:
    """
    Edit distance counting a swap of adjacent characters as one edit.

    This is the optimal string alignment variant of Levenshtein distance;
    recognition engines often transpose neighbouring glyphs.

    Example:
        >>> edit_distance("wrold", "world")
        1
        >>> edit_distance("kitten", "sitting")
        3
    """
    rows = [list(range(len(s2) + 1))]
    for i in range(1, len(s1) + 1):
        row = [i] + [0] * len(s2)
        for j in range(1, len(s2) + 1):
            cost = s1[i - 1] != s2[j - 1]
            row[j] = min(row[j - 1] + 1, rows[i - 1][j] + 1, rows[i - 1][j - 1] + cost)
            if i > 1 and j > 1 and s1[i - 1] == s2[j - 2] and s1[i - 2] == s2[j - 1]:
                row[j] = min(row[j], rows[i - 2][j - 2] + 1)
        rows.append(row)
    return rows[-1][-1]


# =============================================================================
# ORACLES
# =============================================================================


@runtime_checkable
class DictionaryOracle(Protocol):
    """Capability consulted by the SpellCorrector."""

    def is_misspelled(self, word: str) -> bool: ...

    def suggest(self, word: str) -> list[str]: ...


class SpellCheckerOracle:
    """
    Oracle backed by pyspellchecker.

    Suggestions start with the library's most probable correction,
    followed by the remaining candidates by descending word frequency
    (ties broken alphabetically), so the order is deterministic.

    Attributes:
        spell: The underlying SpellChecker.

    Example:
        >>> oracle = SpellCheckerOracle()
        >>> oracle.is_misspelled("wrold")
        True
        >>> oracle.suggest("wrold")[0]
        'world'
    """

    def __init__(self, spell: SpellChecker | None = None, language: str = "en"):
        """
        Initialize the oracle.

        Args:
            spell: Optional preconfigured SpellChecker.
            language: pyspellchecker language code, used when spell is None.
        """
        self.spell = spell if spell is not None else SpellChecker(language=language)

    def is_misspelled(self, word: str) -> bool:
        w = word.lower()
        if not any(ch.isalpha() for ch in w):
            return False
        return w not in self.spell

    def suggest(self, word: str) -> list[str]:
        w = word.lower()
        best = self.spell.correction(w)
        candidates = self.spell.candidates(w) or set()
        ranked = sorted(
            (c for c in candidates if c != best),
            key=lambda c: (-self.spell.word_usage_frequency(c), c),
        )
        suggestions = [best, *ranked] if best else ranked
        return [s for s in suggestions if s != w]


class FallbackOracle:
    """
    Degraded, deterministic oracle with no external data.

    A word is valid only if it is in a fixed list of about a hundred
    common English words; suggestions come from a ten-word pool within
    edit distance 2, nearest first.

    Example:
        >>> oracle = FallbackOracle()
        >>> oracle.is_misspelled("tbe")
        True
        >>> oracle.suggest("tbe")
        ['the']
    """

    def __init__(
        self,
        known_words: frozenset[str] = COMMON_WORDS,
        suggestion_pool: tuple[str, ...] = SUGGESTION_POOL,
    ):
        self.known_words = known_words
        self.suggestion_pool = suggestion_pool

    def is_misspelled(self, word: str) -> bool:
        w = word.lower()
        if not any(ch.isalpha() for ch in w):
            return False
        return w not in self.known_words

    def suggest(self, word: str) -> list[str]:
        w = word.lower()
        scored = []
        for rank, candidate in enumerate(self.suggestion_pool):
            distance = edit_distance(w, candidate)
            if distance <= FALLBACK_MAX_DISTANCE:
                scored.append((distance, rank, candidate))
        scored.sort()
        return [candidate for _, _, candidate in scored[:FALLBACK_MAX_SUGGESTIONS]]


def create_oracle(language: str = "eng") -> DictionaryOracle:
    """
    Build the dictionary oracle for a recognition language.

    Initialisation failure is not fatal: the FallbackOracle is returned
    instead and a warning is logged.

    Args:
        language: Recognition language code ("eng", "deu", ...) or a
            pyspellchecker code ("en", "de", ...).

    Returns:
        A ready-to-use oracle.
    """
    code = OCR_TO_DICTIONARY_LANGUAGE.get(language, language)
    try:
        oracle = SpellCheckerOracle(language=code)
        logger.debug("Initialized spellchecker dictionary for %r", code)
        return oracle
    except (ValueError, OSError) as e:
        logger.warning(
            "Spell checker dictionary unavailable for %r (%s); using fallback word list",
            code,
            e,
        )
        return FallbackOracle()
