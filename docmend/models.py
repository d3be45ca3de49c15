"""
Data models for docmend.

These models describe the pipeline's input (pages of recognised text),
its intermediate line stream, and the conversion result.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docmend.ocr.spelling import SpellStats

logger = logging.getLogger(__name__)

# Pages below this recognition confidence are reported as low confidence
LOW_CONFIDENCE_THRESHOLD = 70.0

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0


# ═══════════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Page:
    """
    One page of recognised text.

    Produced by the external recognition engine, or by direct text
    extraction (see from_extracted_text). Confidence is clamped to 0-100
    and NaN counts as 0.
    """

    page_number: int
    raw_text: str
    confidence: float = MAX_CONFIDENCE
    is_text_only: bool = False

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        confidence = float(self.confidence)
        if math.isnan(confidence):
            confidence = MIN_CONFIDENCE
        clamped = min(max(confidence, MIN_CONFIDENCE), MAX_CONFIDENCE)
        object.__setattr__(self, "confidence", clamped)
        if self.raw_text is None:
            object.__setattr__(self, "raw_text", "")

    @classmethod
    def from_extracted_text(cls, page_number: int, text: str) -> Page:
        """Page obtained by direct text extraction; always fully confident."""
        return cls(
            page_number=page_number,
            raw_text=text,
            confidence=MAX_CONFIDENCE,
            is_text_only=True,
        )

    @property
    def has_text(self) -> bool:
        return bool(self.raw_text and self.raw_text.strip())


@dataclass(frozen=True)
class Document:
    """
    Ordered sequence of pages.

    Pages keep the order in which they were received; nothing in docmend
    reorders them. The document owns the aggregate confidence statistics.

    Example:
        >>> doc = Document.from_pages([Page(1, "Hello", 95.0), Page(2, "World", 40.0)])
        >>> doc.average_confidence
        67.5
        >>> doc.low_confidence_pages
        [2]
    """

    pages: tuple[Page, ...] = ()

    def __post_init__(self) -> None:
        previous = 0
        for page in self.pages:
            if page.page_number < previous:
                logger.warning(
                    "Page %d received after page %d; keeping received order",
                    page.page_number,
                    previous,
                )
            previous = max(previous, page.page_number)

    @classmethod
    def from_pages(cls, pages: list[Page] | tuple[Page, ...]) -> Document:
        return cls(pages=tuple(pages))

    @property
    def text(self) -> str:
        """Page texts joined by a blank line, in received order."""
        return "\n\n".join(page.raw_text.strip() for page in self.pages if page.has_text)

    @property
    def is_empty(self) -> bool:
        return not any(page.has_text for page in self.pages)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def word_count(self) -> int:
        return sum(len(page.raw_text.split()) for page in self.pages)

    @property
    def average_confidence(self) -> float:
        if not self.pages:
            return 0.0
        return sum(page.confidence for page in self.pages) / len(self.pages)

    @property
    def low_confidence_pages(self) -> list[int]:
        return self.pages_below(LOW_CONFIDENCE_THRESHOLD)

    def pages_below(self, threshold: float) -> list[int]:
        """Page numbers whose confidence is strictly below threshold."""
        return [page.page_number for page in self.pages if page.confidence < threshold]


# ═══════════════════════════════════════════════════════════════════════════════
# Line stream
# ═══════════════════════════════════════════════════════════════════════════════


class LineKind(Enum):
    """Classification of a reconstructed line."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST_ITEM = "list_item"
    BLANK = "blank"


class ListKind(Enum):
    """Kind of list marker."""

    BULLET = "bullet"
    NUMBERED = "numbered"


@dataclass(frozen=True)
class Heading:
    """A classified heading. Level is 1 (top) to 6."""

    level: int
    text: str
    anchor: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"heading level must be between 1 and 6, got {self.level}")
        if not self.anchor:
            # Local import: extractors depend on models
            from docmend.extractors.headings import make_anchor

            object.__setattr__(self, "anchor", make_anchor(self.text))

    @property
    def markdown(self) -> str:
        return "#" * self.level + " " + self.text


@dataclass(frozen=True)
class ListItem:
    """A bullet or numbered list entry."""

    level: int
    kind: ListKind
    marker: str
    text: str

    @property
    def markdown(self) -> str:
        return "  " * (self.level - 1) + self.marker + " " + self.text


@dataclass(frozen=True)
class LogicalLine:
    """A line after paragraph reconstruction, tagged with its kind."""

    kind: LineKind
    text: str = ""
    heading: Heading | None = None
    list_item: ListItem | None = None

    @classmethod
    def paragraph(cls, text: str) -> LogicalLine:
        return cls(kind=LineKind.PARAGRAPH, text=text)

    @classmethod
    def blank(cls) -> LogicalLine:
        return cls(kind=LineKind.BLANK)

    @classmethod
    def from_heading(cls, heading: Heading) -> LogicalLine:
        return cls(kind=LineKind.HEADING, text=heading.text, heading=heading)

    @classmethod
    def from_list_item(cls, item: ListItem) -> LogicalLine:
        return cls(kind=LineKind.LIST_ITEM, text=item.text, list_item=item)

    @property
    def is_blank(self) -> bool:
        return self.kind is LineKind.BLANK


# ═══════════════════════════════════════════════════════════════════════════════
# Output
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class ConversionResult:
    """
    The main output type for users.

    Holds the rendered Markdown plus the confidence statistics and
    diagnostics gathered while producing it.

    Example:
        >>> result = docmend.convert(pages)
        >>> print(result.markdown)
        >>> result.flagged_pages
        [3]
        >>> result.save("output.md")
    """

    # Core output
    markdown: str

    # Structure
    headings: list[Heading] = field(default_factory=list)

    # Source statistics
    page_count: int = 0
    average_confidence: float = 0.0
    low_confidence_pages: list[int] = field(default_factory=list)
    flagged_pages: list[int] = field(default_factory=list)

    # Spell correction statistics (None when the stage was disabled)
    spell_stats: SpellStats | None = None

    # Passthrough settings
    ocr_language: str = "eng"
    output_format: str = "markdown"

    # Diagnostics
    warnings: list[str] = field(default_factory=list)
    processing_log: list[str] = field(default_factory=list)

    def save(self, path: str | Path) -> None:
        """
        Save markdown to file.

        Args:
            path: Output file path
        """
        Path(path).write_text(self.markdown, encoding="utf-8")

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the result
        """
        return {
            "markdown": self.markdown,
            "headings": [
                {"level": h.level, "text": h.text, "anchor": h.anchor} for h in self.headings
            ],
            "page_count": self.page_count,
            "average_confidence": self.average_confidence,
            "low_confidence_pages": self.low_confidence_pages,
            "flagged_pages": self.flagged_pages,
            "spell_stats": self.spell_stats.to_dict() if self.spell_stats else None,
            "ocr_language": self.ocr_language,
            "output_format": self.output_format,
            "warnings": self.warnings,
        }
