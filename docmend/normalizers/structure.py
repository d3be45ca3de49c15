"""
Paragraph reconstruction from wrapped recognition output.

Recognition engines emit one physical line per printed line. This module
folds those lines back into logical lines: paragraphs (wrapped lines
joined with single spaces), headings, list items and blanks.

The paragraph buffer is an explicit immutable value passed through a
pure step function, so reconstruction of a text depends on nothing but
that text and the classifiers.
"""

from __future__ import annotations

import logging
import re

from docmend.extractors.headings import HeadingClassifier
from docmend.extractors.layout import is_layout_line
from docmend.extractors.lists import ListClassifier
from docmend.models import LogicalLine

logger = logging.getLogger(__name__)

PAGE_SEPARATOR_PATTERN = re.compile(r"^---\s*Page\s+\d+\s*---$")
SENTENCE_END = (".", "!", "?")

Buffer = tuple[str, ...]


def _starts_uppercase(line: str) -> bool:
    return bool(line) and line[0].isupper()


def should_merge(
    line: str,
    buffer: Buffer,
    heading_classifier: HeadingClassifier | None = None,
) -> bool:
    """
    Decide whether a line continues the paragraph in the buffer.

    Rules, first applicable wins:
        (a) empty buffer                                   -> new paragraph
        (b) line looks like a heading                      -> new paragraph
        (c) buffer ends a sentence, line starts uppercase  -> new paragraph
        (d) line does not start uppercase                  -> merge
        (e) buffer does not end a sentence                 -> merge
        (f) otherwise                                      -> new paragraph

    Args:
        line: Stripped candidate line.
        buffer: Lines of the paragraph being built.
        heading_classifier: Classifier for rule (b).

    Returns:
        True if the line should be appended to the buffer.
    """
    if not buffer:
        return False
    heading_classifier = heading_classifier or HeadingClassifier()
    if heading_classifier.looks_like_heading(line):
        return False

    ends_sentence = buffer[-1].endswith(SENTENCE_END)
    if ends_sentence and _starts_uppercase(line):
        return False
    if not _starts_uppercase(line):
        return True
    if not ends_sentence:
        return True
    return False


class StructureReconstructor:
    """
    Rebuilds logical lines from raw line-broken text.

    Attributes:
        heading_classifier: Decides which lines are headings.
        list_classifier: Decides which lines are list items.

    Example:
        >>> rebuilt = StructureReconstructor().rebuild(
        ...     "This sentence continues\\nonto the next line."
        ... )
        >>> [line.text for line in rebuilt]
        ['This sentence continues onto the next line.']
    """

    def __init__(
        self,
        heading_classifier: HeadingClassifier | None = None,
        list_classifier: ListClassifier | None = None,
    ):
        self.heading_classifier = heading_classifier or HeadingClassifier()
        self.list_classifier = list_classifier or ListClassifier()

    def rebuild(self, text: str, preserve_layout: bool = False) -> list[LogicalLine]:
        """
        Fold text into logical lines.

        Args:
            text: Corrected text, possibly spanning many pages.
            preserve_layout: Keep table rows and indented code as
                standalone lines with their spacing intact.

        Returns:
            Logical lines in reading order.
        """
        if not text:
            return []

        result: list[LogicalLine] = []
        buffer: Buffer = ()
        for raw in text.split("\n"):
            buffer, emitted = self._step(buffer, raw, preserve_layout)
            result.extend(emitted)
        result.extend(_flush(buffer))

        logger.debug("Rebuilt %d logical lines", len(result))
        return result

    def _step(
        self,
        buffer: Buffer,
        raw: str,
        preserve_layout: bool,
    ) -> tuple[Buffer, list[LogicalLine]]:
        """Consume one physical line; return the new buffer and emitted lines."""
        raw = raw.rstrip()
        line = raw.strip()

        if PAGE_SEPARATOR_PATTERN.match(line):
            return buffer, []

        if not line:
            return (), [*_flush(buffer), LogicalLine.blank()]

        heading = self.heading_classifier.classify(line)
        if heading:
            return (), [*_flush(buffer), LogicalLine.from_heading(heading)]

        item = self.list_classifier.classify(raw)
        if item:
            return (), [*_flush(buffer), LogicalLine.from_list_item(item)]

        if preserve_layout and is_layout_line(raw):
            return (), [*_flush(buffer), LogicalLine.paragraph(raw)]

        if should_merge(line, buffer, self.heading_classifier):
            return (*buffer, line), []
        return (line,), _flush(buffer)


def _flush(buffer: Buffer) -> list[LogicalLine]:
    if not buffer:
        return []
    return [LogicalLine.paragraph(" ".join(buffer))]
