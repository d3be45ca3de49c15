"""
Text-only layout heuristics shared by reconstruction and rendering.

These look at the characters of a single line; there is no spatial
information behind them.
"""

from __future__ import annotations

import re

TABLE_ROW_PATTERN = re.compile(r"\w+\s{2,}\w+")
TABLE_CELL_SPLIT = re.compile(r"\s{2,}|\t+")

CODE_SYMBOL_PATTERN = re.compile(r"[{}();=<>]")
CODE_INDENT_PATTERN = re.compile(r"^\s{4,}")
WORD_CHAR_PATTERN = re.compile(r"\w")

CODE_KEYWORDS = frozenset(
    {
        "function",
        "var",
        "let",
        "const",
        "if",
        "else",
        "for",
        "while",
        "return",
        "import",
        "export",
        "class",
        "def",
        "public",
        "private",
    }
)


def looks_like_table_row(line: str) -> bool:
    """Several words separated by 2+ spaces, or a tab anywhere."""
    stripped = line.strip()
    if not stripped:
        return False
    return "\t" in stripped or bool(TABLE_ROW_PATTERN.search(stripped))


def split_table_cells(line: str) -> list[str]:
    return [cell.strip() for cell in TABLE_CELL_SPLIT.split(line.strip())]


def is_code_indented(line: str) -> bool:
    return bool(CODE_INDENT_PATTERN.match(line)) and bool(WORD_CHAR_PATTERN.search(line))


def looks_like_code(line: str) -> bool:
    """
    Naive code detection.

    A line is code-like when it contains one of ``{ } ( ) ; = < >``,
    starts with a programming keyword, or is indented by 4+ spaces and
    contains alphanumerics.
    """
    stripped = line.strip()
    if not stripped:
        return False
    if CODE_SYMBOL_PATTERN.search(stripped):
        return True
    first_word = re.split(r"\W", stripped, maxsplit=1)[0]
    if first_word in CODE_KEYWORDS:
        return True
    return is_code_indented(line)


def is_layout_line(line: str) -> bool:
    """Lines whose spacing carries meaning: table rows and indented code."""
    return looks_like_table_row(line) or is_code_indented(line)
