"""
Markdown rendering of reconstructed logical lines.

The renderer walks the line stream once, keeping an open/closed code
fence flag and looking ahead for runs of table rows. Headings, list
items and paragraphs become Markdown blocks; an optional front-matter
block and table of contents are prepended, and a final cleanup pass
normalises blank lines and trailing whitespace.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from docmend.extractors.layout import looks_like_code, looks_like_table_row, split_table_cells
from docmend.models import Heading, LineKind, LogicalLine

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TITLE = "Processed Document"
DEFAULT_GENERATOR = "docmend"

NO_CONTENT_PLACEHOLDER = (
    "No content could be processed from the document. "
    "Please check the processing logs for errors."
)

TOC_HEADING = "## Table of Contents"
CODE_FENCE = "```"
MIN_TABLE_ROWS = 2

BOLD_PATTERN = re.compile(r"\b([A-Z]{2,})\b(?!\s*[.!?])")
URL_PATTERN = re.compile(r"(https?://[^\s]+)")
EMAIL_PATTERN = re.compile(r"\b([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b")

EXCESS_BLANK_LINES = re.compile(r"\n{4,}")


# =============================================================================
# OPTIONS
# =============================================================================


@dataclass
class RenderOptions:
    """
    Options for one render call.

    Attributes:
        include_metadata: Prepend a front-matter block.
        include_toc: Prepend a table of contents built from the headings.
        preserve_formatting: Apply inline bold/link formatting to paragraphs.
        source: Source identifier written to the front matter.
        title: Document title written to the front matter.
        generator: Generator string written to the front matter.
        processed_at: Timestamp for the front matter; now (UTC) if None.
    """

    include_metadata: bool = True
    include_toc: bool = False
    preserve_formatting: bool = True
    source: str = ""
    title: str = DEFAULT_TITLE
    generator: str = DEFAULT_GENERATOR
    processed_at: datetime | None = None


# =============================================================================
# HELPERS
# =============================================================================


def format_inline(text: str) -> str:
    """
    Inline formatting for paragraph text.

    All-caps tokens that do not end a sentence become bold, bare URLs
    and e-mail addresses become links.

    Example:
        >>> format_inline("See NASA data at https://nasa.gov")
        'See **NASA** data at [https://nasa.gov](https://nasa.gov)'
    """
    text = BOLD_PATTERN.sub(r"**\1**", text)
    text = URL_PATTERN.sub(r"[\1](\1)", text)
    return EMAIL_PATTERN.sub(r"[\1](mailto:\1)", text)


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_metadata(options: RenderOptions) -> list[str]:
    processed_at = options.processed_at or datetime.now(timezone.utc)
    return [
        "---",
        f"title: {_quote(options.title)}",
        f"source: {_quote(options.source)}",
        f"processed_date: {_quote(processed_at.isoformat())}",
        f"generator: {_quote(options.generator)}",
        "---",
        "",
    ]


def render_toc(headings: Sequence[Heading]) -> list[str]:
    """Table of contents lines, or an empty list when there are no headings."""
    if not headings:
        return []
    lines = [TOC_HEADING, ""]
    for heading in headings:
        lines.append("  " * (heading.level - 1) + f"- [{heading.text}](#{heading.anchor})")
    lines.append("")
    return lines


def render_table(rows: Sequence[str]) -> list[str]:
    """Pipe table with a separator after the first row."""
    cells = [split_table_cells(row) for row in rows]
    lines = ["| " + " | ".join(row) + " |" for row in cells]
    lines.insert(1, "|" + " --- |" * len(cells[0]))
    return lines


def final_cleanup(markdown: str) -> str:
    """Collapse 3+ blank lines to two, trim line ends, end with one newline."""
    cleaned = EXCESS_BLANK_LINES.sub("\n\n\n", markdown)
    cleaned = "\n".join(line.rstrip() for line in cleaned.split("\n"))
    return cleaned.rstrip() + "\n"


def _ensure_blank(out: list[str]) -> None:
    if out and out[-1] != "":
        out.append("")


# =============================================================================
# RENDERER
# =============================================================================


class DocumentRenderer:
    """
    Renders logical lines to a Markdown document.

    Example:
        >>> from docmend.normalizers import StructureReconstructor
        >>> lines = StructureReconstructor().rebuild("HELLO WORLD\\n\\nThis is a test.")
        >>> print(DocumentRenderer().render(lines, RenderOptions(include_metadata=False)))
        ## Hello World
        <BLANKLINE>
        This is a test.
        <BLANKLINE>
    """

    def render(
        self,
        lines: Sequence[LogicalLine],
        options: RenderOptions | None = None,
    ) -> str:
        """
        Render a line stream.

        Args:
            lines: Logical lines in reading order.
            options: Render options (defaults if None).

        Returns:
            Markdown text ending in exactly one newline.
        """
        options = options or RenderOptions()

        headings = [line.heading for line in lines if line.heading is not None]
        body = self.render_body(lines, options.preserve_formatting)
        if not any(body):
            logger.warning("No renderable content; emitting placeholder")
            body = [NO_CONTENT_PLACEHOLDER]

        out: list[str] = []
        if options.include_metadata:
            out.extend(render_metadata(options))
        if options.include_toc:
            out.extend(render_toc(headings))
        out.extend(body)

        logger.debug("Rendered %d lines, %d headings", len(body), len(headings))
        return final_cleanup("\n".join(out))

    def render_body(self, lines: Sequence[LogicalLine], preserve_formatting: bool = True) -> list[str]:
        out: list[str] = []
        in_code = False
        i = 0

        while i < len(lines):
            line = lines[i]
            rows = _table_run(lines, i)
            is_table = len(rows) >= MIN_TABLE_ROWS
            is_code = (
                not is_table and line.kind is LineKind.PARAGRAPH and looks_like_code(line.text)
            )

            if in_code and not is_code:
                out.append(CODE_FENCE)
                in_code = False

            if is_table:
                _ensure_blank(out)
                out.extend(render_table(rows))
                out.append("")
                i += len(rows)
                continue

            if is_code:
                if not in_code:
                    out.append(CODE_FENCE)
                    in_code = True
                out.append(line.text.strip())
            elif line.kind is LineKind.BLANK:
                _ensure_blank(out)
            elif line.kind is LineKind.HEADING:
                _ensure_blank(out)
                out.append(line.heading.markdown)
                out.append("")
            elif line.kind is LineKind.LIST_ITEM:
                out.append(line.list_item.markdown)
            elif preserve_formatting:
                out.append(format_inline(line.text.strip()))
            else:
                out.append(line.text.strip())

            i += 1

        if in_code:
            out.append(CODE_FENCE)
        return out


def _table_run(lines: Sequence[LogicalLine], start: int) -> list[str]:
    """Consecutive table-like paragraph lines starting at start."""
    rows = []
    for line in lines[start:]:
        if line.kind is not LineKind.PARAGRAPH or not looks_like_table_row(line.text):
            break
        rows.append(line.text)
    return rows
