"""
Whitespace, punctuation-spacing and capitalisation cleanup.

FlowNormalizer.normalize is idempotent: normalising its own output
changes nothing.
"""

from __future__ import annotations

import re

WHITESPACE_RUN = re.compile(r"\s+")
SPACE_BEFORE_PUNCTUATION = re.compile(r"\s+([,.;:!?])")
MISSING_SPACE_AFTER_SENTENCE = re.compile(r"([.!?])([^\W\d_])")
LOWERCASE_SENTENCE_START = re.compile(r"([.!?]\s+)([^\W\d_])")

# URLs and e-mail addresses pass through untouched
PROTECTED_PATTERN = re.compile(
    r"https?://\S+|[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}"
)


class FlowNormalizer:
    """
    Tidies the text flow of one logical line.

    Example:
        >>> FlowNormalizer().normalize("it ended .the  next one began")
        'it ended. The next one began'
    """

    def normalize(self, text: str) -> str:
        if not text:
            return ""

        text = WHITESPACE_RUN.sub(" ", text).strip()

        pieces = []
        position = 0
        for match in PROTECTED_PATTERN.finditer(text):
            pieces.append(self._punctuate(text[position : match.start()]))
            pieces.append(match.group())
            position = match.end()
        pieces.append(self._punctuate(text[position:]))
        return "".join(pieces)

    @staticmethod
    def _punctuate(segment: str) -> str:
        segment = SPACE_BEFORE_PUNCTUATION.sub(r"\1", segment)
        segment = MISSING_SPACE_AFTER_SENTENCE.sub(r"\1 \2", segment)
        return LOWERCASE_SENTENCE_START.sub(
            lambda m: m.group(1) + m.group(2).upper(), segment
        )
