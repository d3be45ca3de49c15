"""
Reader for per-page recognition records.

The recognition engine runs outside docmend and hands over one record
per page. Records are mappings in either the engine's camelCase form::

    {"pageNumber": 1, "text": "...", "confidence": 87.5, "isTextOnly": False}

or with snake_case names (``page_number``, ``raw_text``,
``is_text_only``). Bounding data (``words``, ``lines``, ``paragraphs``)
is accepted and ignored. Malformed values never abort a conversion:
they are replaced by safe defaults and logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from docmend.models import MAX_CONFIDENCE, Document, Page

logger = logging.getLogger(__name__)

PAGE_NUMBER_KEYS = ("pageNumber", "page_number", "page")
TEXT_KEYS = ("text", "raw_text")
CONFIDENCE_KEYS = ("confidence",)
TEXT_ONLY_KEYS = ("isTextOnly", "is_text_only")
EXTRACTED_TEXT_KEYS = ("extractedText", "extracted_text")


def _first(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


class PageReader:
    """
    Converts raw page records into a Document.

    Example:
        >>> doc = PageReader().read([
        ...     {"pageNumber": 1, "text": "First page", "confidence": 91},
        ...     {"pageNumber": 2, "text": "Second page", "confidence": 55},
        ... ])
        >>> doc.low_confidence_pages
        [2]
    """

    def read(self, records: Iterable[Mapping[str, Any] | Page]) -> Document:
        pages = [self.read_page(record, position) for position, record in enumerate(records, 1)]
        logger.debug("Read %d page records", len(pages))
        return Document.from_pages(pages)

    def read_page(self, record: Mapping[str, Any] | Page, position: int) -> Page:
        """
        Build one Page.

        Args:
            record: Page record, or an existing Page (returned unchanged).
            position: 1-based position of the record, used when the page
                number is missing or invalid.

        Returns:
            Page built from the record.
        """
        if isinstance(record, Page):
            return record
        if not isinstance(record, Mapping):
            logger.warning("Page record %d is not a mapping (%s); using empty page",
                           position, type(record).__name__)
            return Page(page_number=position, raw_text="", confidence=0.0)

        page_number = self._page_number(record, position)

        if _first(record, TEXT_ONLY_KEYS):
            extracted = _first(record, EXTRACTED_TEXT_KEYS)
            if isinstance(extracted, str):
                return Page.from_extracted_text(page_number, extracted)

        text = _first(record, TEXT_KEYS)
        if text is None:
            text = ""
        elif not isinstance(text, str):
            logger.warning("Page %d: text is %s, not a string; using empty text",
                           page_number, type(text).__name__)
            text = ""

        return Page(
            page_number=page_number,
            raw_text=text,
            confidence=self._confidence(record, page_number),
            is_text_only=bool(_first(record, TEXT_ONLY_KEYS)),
        )

    @staticmethod
    def _page_number(record: Mapping[str, Any], position: int) -> int:
        value = _first(record, PAGE_NUMBER_KEYS)
        if value is None:
            return position
        try:
            number = int(value)
        except (TypeError, ValueError):
            number = 0
        if number < 1 or isinstance(value, bool):
            logger.warning("Invalid page number %r; using position %d", value, position)
            return position
        return number

    @staticmethod
    def _confidence(record: Mapping[str, Any], page_number: int) -> float:
        value = _first(record, CONFIDENCE_KEYS)
        if value is None:
            logger.warning("Page %d has no confidence; assuming 0", page_number)
            return 0.0
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            logger.warning("Page %d: invalid confidence %r; assuming 0", page_number, value)
            return 0.0
        if confidence != confidence:  # NaN
            logger.warning("Page %d: confidence is NaN; assuming 0", page_number)
            return 0.0
        if not 0.0 <= confidence <= MAX_CONFIDENCE:
            logger.warning("Page %d: confidence %s outside 0-100; clamping", page_number, value)
        return confidence


def read_pages(records: Iterable[Mapping[str, Any] | Page]) -> Document:
    """
    Read page records into a Document.

    Args:
        records: Page records in reading order.

    Returns:
        Document with one Page per record, in received order.
    """
    return PageReader().read(records)
