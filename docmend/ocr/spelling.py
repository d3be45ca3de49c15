"""
Token-level spell correction through a dictionary oracle.

The corrector never decides what is a word on its own: it strips each
whitespace-delimited token to a comparison key, skips short keys and
allow-listed terms, and asks the injected oracle. Whether a suggestion
is accepted depends on the correction mode:

- non-aggressive: only if the edit distance to the key is at most
  max(1, floor(len(key) * 0.3))
- aggressive: the top suggestion is always taken
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass

from docmend.config import parse_custom_dictionary
from docmend.ocr.dictionary import DictionaryOracle, create_oracle, edit_distance

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_KEY_LENGTH",
    "SpellCorrector",
    "SpellStats",
    "SpellToken",
    "parse_custom_dictionary",
]


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_KEY_LENGTH = 2
DISTANCE_RATIO = 0.3

NON_WORD_PATTERN = re.compile(r"[^\w]")
# Split keeping the whitespace runs so line layout survives correction
TOKEN_SPLIT_PATTERN = re.compile(r"(\s+)")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class SpellToken:
    """One token and the corrector's decision about it."""

    original: str
    key: str
    corrected: str
    suggestion: str | None = None
    distance: int | None = None
    reason: str = "unchanged"

    @property
    def was_corrected(self) -> bool:
        return self.corrected != self.original


@dataclass
class SpellStats:
    """Statistics for spell correction."""

    words_checked: int = 0
    skipped_short: int = 0
    skipped_custom: int = 0
    misspelled: int = 0
    corrected: int = 0
    rejected: int = 0

    def merge(self, other: SpellStats) -> None:
        for name, value in asdict(other).items():
            setattr(self, name, getattr(self, name) + value)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def max_accepted_distance(key: str) -> int:
    """Largest edit distance accepted in non-aggressive mode."""
    return max(1, int(len(key) * DISTANCE_RATIO))


def _match_case(key: str, suggestion: str) -> str:
    if len(key) > 1 and key.isupper():
        return suggestion.upper()
    if key[:1].isupper():
        return suggestion[:1].upper() + suggestion[1:]
    return suggestion


# =============================================================================
# SPELL CORRECTOR
# =============================================================================


class SpellCorrector:
    """
    Corrects misspelled tokens using a dictionary oracle.

    The custom dictionary is supplied per call and never modified; the
    oracle is shared and only queried.

    Attributes:
        oracle: Dictionary capability ({is_misspelled, suggest}).

    Example:
        >>> corrector = SpellCorrector(FallbackOracle())
        >>> corrector.correct("tbe", aggressive=True)
        'the'
    """

    def __init__(self, oracle: DictionaryOracle | None = None):
        """
        Initialize the corrector.

        Args:
            oracle: Dictionary oracle. Defaults to create_oracle(), which
                falls back to a small word list if pyspellchecker's
                dictionary cannot be loaded.
        """
        self.oracle = oracle if oracle is not None else create_oracle()

    def check_token(
        self,
        token: str,
        custom_dictionary: frozenset[str] = frozenset(),
        aggressive: bool = False,
    ) -> SpellToken:
        """
        Decide the corrected form of a single token.

        Args:
            token: Whitespace-free token, possibly with punctuation.
            custom_dictionary: Lower-cased allow-listed terms.
            aggressive: Always accept the top suggestion.

        Returns:
            SpellToken describing the decision.
        """
        key = NON_WORD_PATTERN.sub("", token)

        if len(key) < MIN_KEY_LENGTH:
            return SpellToken(token, key, token, reason="short")

        if key.lower() in custom_dictionary:
            return SpellToken(token, key, token, reason="custom")

        if not self.oracle.is_misspelled(key):
            return SpellToken(token, key, token, reason="known")

        suggestions = self.oracle.suggest(key)
        if not suggestions:
            return SpellToken(token, key, token, reason="no_suggestion")

        best = suggestions[0]
        distance = edit_distance(key.lower(), best.lower())
        if not aggressive and distance > max_accepted_distance(key):
            return SpellToken(token, key, token, best, distance, reason="distance")

        corrected = token.replace(key, _match_case(key, best), 1)
        return SpellToken(token, key, corrected, best, distance, reason="corrected")

    def tokens(
        self,
        text: str,
        custom_dictionary: frozenset[str] = frozenset(),
        aggressive: bool = False,
    ) -> list[SpellToken]:
        """Decisions for every whitespace-delimited token of text."""
        return [
            self.check_token(part, custom_dictionary, aggressive)
            for part in text.split()
        ]

    def correct_with_stats(
        self,
        text: str,
        custom_dictionary: frozenset[str] = frozenset(),
        aggressive: bool = False,
    ) -> tuple[str, SpellStats]:
        """
        Correct text and return statistics.

        Whitespace between tokens is kept exactly as it was.

        Args:
            text: Text to correct.
            custom_dictionary: Lower-cased allow-listed terms.
            aggressive: Always accept the top suggestion.

        Returns:
            Tuple of (corrected_text, statistics).
        """
        stats = SpellStats()
        if not text or not text.strip():
            return text, stats

        parts = TOKEN_SPLIT_PATTERN.split(text)
        for i, part in enumerate(parts):
            if not part or part.isspace():
                continue

            token = self.check_token(part, custom_dictionary, aggressive)
            stats.words_checked += 1
            if token.reason == "short":
                stats.skipped_short += 1
            elif token.reason == "custom":
                stats.skipped_custom += 1
            elif token.reason != "known":
                stats.misspelled += 1
                if token.was_corrected:
                    stats.corrected += 1
                    logger.debug("Corrected %r -> %r", token.original, token.corrected)
                else:
                    stats.rejected += 1
            parts[i] = token.corrected

        return "".join(parts), stats

    def correct(
        self,
        text: str,
        custom_dictionary: frozenset[str] = frozenset(),
        aggressive: bool = False,
    ) -> str:
        """
        Correct misspelled tokens in text.

        Args:
            text: Text to correct.
            custom_dictionary: Lower-cased allow-listed terms.
            aggressive: Always accept the top suggestion.

        Returns:
            Corrected text.

        Example:
            >>> corrector.correct("Hello wrold!")
            'Hello world!'
        """
        corrected, _ = self.correct_with_stats(text, custom_dictionary, aggressive)
        return corrected
