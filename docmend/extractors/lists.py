"""
List item classification.

Bullet markers are normalised to "-"; numbered markers ("3." or "3)")
are kept as written. Nesting comes from indentation: every two leading
whitespace characters add one level.
"""

from __future__ import annotations

import re

from docmend.models import ListItem, ListKind

BULLET_MARKERS = "•◦‣⁃∙-*"  # • ◦ ‣ ⁃ ∙ - *
CANONICAL_BULLET = "-"

BULLET_PATTERN = re.compile(rf"^(\s*)([{re.escape(BULLET_MARKERS)}])\s+(.+)$")
NUMBERED_PATTERN = re.compile(r"^(\s*)(\d+[.)])\s+(.+)$")


def indent_level(indent: str) -> int:
    """Nesting level for a run of leading whitespace (1 = top level)."""
    return len(indent) // 2 + 1


class ListClassifier:
    """
    Classifies a line as a bullet or numbered list item.

    Example:
        >>> ListClassifier().classify("    • nested point")
        ListItem(level=3, kind=<ListKind.BULLET: 'bullet'>, marker='-', text='nested point')
    """

    def classify(self, line: str) -> ListItem | None:
        line = line.rstrip()

        m = BULLET_PATTERN.match(line)
        if m:
            return ListItem(
                level=indent_level(m.group(1)),
                kind=ListKind.BULLET,
                marker=CANONICAL_BULLET,
                text=m.group(3).strip(),
            )

        m = NUMBERED_PATTERN.match(line)
        if m:
            return ListItem(
                level=indent_level(m.group(1)),
                kind=ListKind.NUMBERED,
                marker=m.group(2),
                text=m.group(3).strip(),
            )

        return None
