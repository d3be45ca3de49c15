"""
Line classifiers for document structure.

- HeadingClassifier: ordered heading pattern table
- ListClassifier: bullet and numbered list items
- layout helpers: table-row and code-line heuristics
"""

from docmend.extractors.headings import (
    HEADING_PATTERNS,
    HeadingClassifier,
    HeadingPattern,
    make_anchor,
    to_title_case,
)
from docmend.extractors.layout import (
    is_layout_line,
    looks_like_code,
    looks_like_table_row,
    split_table_cells,
)
from docmend.extractors.lists import ListClassifier

__all__ = [
    "HeadingClassifier",
    "HeadingPattern",
    "HEADING_PATTERNS",
    "make_anchor",
    "to_title_case",
    "ListClassifier",
    "looks_like_table_row",
    "looks_like_code",
    "is_layout_line",
    "split_table_cells",
]
