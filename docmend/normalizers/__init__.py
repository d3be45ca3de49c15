"""
Text normalizers for docmend.

- StructureReconstructor: folds wrapped lines back into logical lines
- FlowNormalizer: whitespace, punctuation spacing and capitalisation
"""

from docmend.normalizers.flow import FlowNormalizer
from docmend.normalizers.structure import (
    PAGE_SEPARATOR_PATTERN,
    StructureReconstructor,
    should_merge,
)

__all__ = [
    "StructureReconstructor",
    "should_merge",
    "PAGE_SEPARATOR_PATTERN",
    "FlowNormalizer",
]
