"""
Tests for the text-only layout heuristics.
"""

from docmend.extractors.layout import (
    is_code_indented,
    is_layout_line,
    looks_like_code,
    looks_like_table_row,
    split_table_cells,
)


class TestTableRows:
    """Tests for table row detection."""

    def test_double_space_separated(self):
        """Words separated by two or more spaces form a row."""
        assert looks_like_table_row("Name  Age")

    def test_tab_separated(self):
        """A tab anywhere makes a row."""
        assert looks_like_table_row("a\tb")

    def test_single_spaces(self):
        """Ordinary prose is not a row."""
        assert not looks_like_table_row("Name Age City")
        assert not looks_like_table_row("   ")

    def test_split_cells(self):
        """Cells split on runs of two or more spaces or tabs."""
        assert split_table_cells("  Name   Age\t\tCity ") == ["Name", "Age", "City"]
        assert split_table_cells("New York  8 million") == ["New York", "8 million"]


class TestCode:
    """Tests for code line detection."""

    def test_symbols(self):
        """Code punctuation anywhere marks a line as code."""
        assert looks_like_code("x = compute(y);")
        assert looks_like_code("a < b")

    def test_leading_keyword(self):
        """A leading programming keyword marks a line as code."""
        assert looks_like_code("return value")
        assert looks_like_code("import os")

    def test_keyword_inside_prose(self):
        """Keywords inside words or later in a sentence do not count."""
        assert not looks_like_code("Therefore the classic argument holds")
        assert not looks_like_code("Notes for the reader")

    def test_indented(self):
        """Indentation of four or more with alphanumerics is code."""
        assert looks_like_code("    total += 1")
        assert is_code_indented("    value")
        assert not is_code_indented("    ...")

    def test_blank(self):
        """Blank lines are never code."""
        assert not looks_like_code("")

    def test_layout_line(self):
        """Layout lines are table rows or indented code."""
        assert is_layout_line("Name  Age")
        assert is_layout_line("    value")
        assert not is_layout_line("Plain prose line")
