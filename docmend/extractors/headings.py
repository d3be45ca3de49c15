"""
Heading classification for single lines of text.

A line is matched against an ordered pattern table and the first
matching pattern decides the level:

    1. Roman numeral prefix   "II. Title"        -> level 1
    2. Numeric prefix         "3. Title"         -> level 2 (n <= 3) or 3
    3. Letter prefix          "B. Title"         -> level 3
    4. All-uppercase line     "RESULTS"          -> level 2 (< 30 chars) or 3
    5. Dotted numbering       "2.3 Title"        -> level 2
    6. Keyword prefix         "Chapter Seven"    -> level 1

The order is significant: "1. INTRODUCTION" is a numeric heading whose
text is "INTRODUCTION", not an all-caps one.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from docmend.models import Heading

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_HEADING_LENGTH = 3
MAX_HEADING_LENGTH = 100

MAX_ALL_CAPS_LENGTH = 50
SHORT_ALL_CAPS_LENGTH = 30

TERMINAL_PUNCTUATION = (".", "!", "?")

ROMAN_PATTERN = re.compile(r"^[IVX]+[.)]\s+(.+)$", re.IGNORECASE)
NUMERIC_PATTERN = re.compile(r"^(\d+)[.)]\s+(.+)$")
LETTER_PATTERN = re.compile(r"^([A-Z])[.)]\s+(.+)$")
DOTTED_PATTERN = re.compile(r"^(\d+\.\d+)\s+(.+)$")
KEYWORD_PATTERN = re.compile(r"^(CHAPTER|SECTION|PART|APPENDIX)\s+(.+)$", re.IGNORECASE)

_ANCHOR_STRIP = re.compile(r"[^\w\s-]")
_ANCHOR_SPACES = re.compile(r"\s+")
_ANCHOR_HYPHENS = re.compile(r"-+")
_WORD_START = re.compile(r"\b\w")


# =============================================================================
# HELPERS
# =============================================================================


def make_anchor(text: str) -> str:
    """
    Derive a URL-safe anchor from heading text.

    Duplicate headings give duplicate anchors; no suffix is added.

    Example:
        >>> make_anchor("Hello, World!")
        'hello-world'
        >>> make_anchor("  2.3 -- Results & Discussion ")
        '23-results-discussion'
    """
    anchor = text.lower()
    anchor = _ANCHOR_STRIP.sub("", anchor)
    anchor = _ANCHOR_SPACES.sub("-", anchor)
    anchor = _ANCHOR_HYPHENS.sub("-", anchor)
    return anchor.strip("-")


def to_title_case(text: str) -> str:
    """Lower-case text, then capitalise the first letter of every word."""
    return _WORD_START.sub(lambda m: m.group().upper(), text.lower())


def is_all_caps_heading(line: str) -> bool:
    """Short upper-case line that does not read as a sentence."""
    return (
        len(line) < MAX_ALL_CAPS_LENGTH
        and line[0].isalpha()
        and line.isupper()
        and not line.endswith(TERMINAL_PUNCTUATION)
    )


# =============================================================================
# PATTERN TABLE
# =============================================================================


@dataclass(frozen=True)
class HeadingPattern:
    """One row of the heading table: a matcher producing (level, text)."""

    name: str
    match: Callable[[str], tuple[int, str] | None]


def _roman(line: str) -> tuple[int, str] | None:
    m = ROMAN_PATTERN.match(line)
    return (1, m.group(1)) if m else None


def _numeric(line: str) -> tuple[int, str] | None:
    m = NUMERIC_PATTERN.match(line)
    if not m:
        return None
    return (2 if int(m.group(1)) <= 3 else 3, m.group(2))


def _letter(line: str) -> tuple[int, str] | None:
    m = LETTER_PATTERN.match(line)
    return (3, m.group(2)) if m else None


def _all_caps(line: str) -> tuple[int, str] | None:
    if not is_all_caps_heading(line):
        return None
    return (2 if len(line) < SHORT_ALL_CAPS_LENGTH else 3, to_title_case(line))


def _dotted(line: str) -> tuple[int, str] | None:
    m = DOTTED_PATTERN.match(line)
    return (2, m.group(2)) if m else None


def _keyword(line: str) -> tuple[int, str] | None:
    m = KEYWORD_PATTERN.match(line)
    return (1, m.group(2)) if m else None


HEADING_PATTERNS = (
    HeadingPattern("roman", _roman),
    HeadingPattern("numeric", _numeric),
    HeadingPattern("letter", _letter),
    HeadingPattern("all_caps", _all_caps),
    HeadingPattern("dotted", _dotted),
    HeadingPattern("keyword", _keyword),
)


# =============================================================================
# CLASSIFIER
# =============================================================================


class HeadingClassifier:
    """
    Classifies a logical line as a heading candidate.

    Lines are stripped before matching; only those between 3 and 100
    characters long are considered.

    Example:
        >>> classifier = HeadingClassifier()
        >>> classifier.classify("1. INTRODUCTION")
        Heading(level=2, text='INTRODUCTION', anchor='introduction')
        >>> classifier.classify("HELLO WORLD").text
        'Hello World'
        >>> classifier.classify("just a sentence.") is None
        True
    """

    def __init__(self, patterns: tuple[HeadingPattern, ...] = HEADING_PATTERNS):
        self.patterns = patterns

    def classify(self, line: str) -> Heading | None:
        """
        Classify a line.

        Args:
            line: A single line; surrounding whitespace is ignored.

        Returns:
            Heading if any pattern matches, otherwise None.
        """
        candidate = line.strip()
        if not MIN_HEADING_LENGTH <= len(candidate) <= MAX_HEADING_LENGTH:
            return None

        for pattern in self.patterns:
            matched = pattern.match(candidate)
            if matched:
                level, text = matched
                logger.debug("Heading (%s, level %d): %r", pattern.name, level, text)
                return Heading(level=level, text=text.strip())
        return None

    def looks_like_heading(self, line: str) -> bool:
        return self.classify(line) is not None
