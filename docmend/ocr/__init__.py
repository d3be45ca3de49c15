"""
Recognition-error correction for docmend.

This package provides the two correction stages that work on raw
recognised text:
- CorrectionRuleEngine: ordered character/word/punctuation rule tables
- SpellCorrector: token correction through an injected dictionary oracle

Example:
    >>> from docmend.ocr import CorrectionRuleEngine, SpellCorrector
    >>> text = CorrectionRuleEngine().apply("Tlie wrold")
    >>> SpellCorrector().correct(text)
    'The world'
"""

from docmend.ocr.dictionary import (
    DictionaryOracle,
    FallbackOracle,
    SpellCheckerOracle,
    create_oracle,
    edit_distance,
)
from docmend.ocr.rules import (
    CHARACTER_RULES,
    DEFAULT_RULES,
    PUNCTUATION_RULES,
    WORD_RULES,
    CorrectionResult,
    CorrectionRule,
    CorrectionRuleEngine,
    RuleScope,
)
from docmend.ocr.spelling import (
    SpellCorrector,
    SpellStats,
    SpellToken,
)

__all__ = [
    # Rules
    "CorrectionRuleEngine",
    "CorrectionRule",
    "CorrectionResult",
    "RuleScope",
    "CHARACTER_RULES",
    "WORD_RULES",
    "PUNCTUATION_RULES",
    "DEFAULT_RULES",
    # Dictionary
    "DictionaryOracle",
    "SpellCheckerOracle",
    "FallbackOracle",
    "create_oracle",
    "edit_distance",
    # Spelling
    "SpellCorrector",
    "SpellToken",
    "SpellStats",
]
