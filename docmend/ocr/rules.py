"""
Rule-based correction of recognition artifacts.

Rules are plain records in ordered tables, applied by one generic
function. Three scopes run in a fixed order:

1. Character rules: literal, global, NOT word-bounded. These are blunt on
   purpose and will also rewrite legitimate substrings ("book" -> "bok").
2. Word rules: whole known artifacts ("tlie" -> "the"), case-insensitive.
3. Punctuation rules: doubled punctuation and stray space before
   punctuation.

Example:
    >>> engine = CorrectionRuleEngine()
    >>> engine.apply("Tlie rnodern world ,, indeed")
    'The modern world, indeed'
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================


class RuleScope(Enum):
    """How a rule's pattern is matched."""

    CHARACTER = "character"
    WORD = "word"
    PUNCTUATION = "punctuation"


# Application order of scopes; not configurable
SCOPE_ORDER = (RuleScope.CHARACTER, RuleScope.WORD, RuleScope.PUNCTUATION)


@dataclass(frozen=True)
class CorrectionRule:
    """A single pattern -> replacement substitution."""

    pattern: str
    replacement: str
    scope: RuleScope

    def compile(self) -> re.Pattern[str]:
        return _compile(self.pattern, self.scope)


@dataclass
class CorrectionResult:
    """Result of applying a rule table to a text."""

    original_text: str
    corrected_text: str
    applied: list[tuple[CorrectionRule, int]] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        """Number of substitutions made."""
        return sum(count for _, count in self.applied)

    @property
    def was_modified(self) -> bool:
        """Whether any changes were made."""
        return self.original_text != self.corrected_text


@lru_cache(maxsize=512)
def _compile(pattern: str, scope: RuleScope) -> re.Pattern[str]:
    if scope is RuleScope.WORD:
        return re.compile(rf"\b{re.escape(pattern)}\b", re.IGNORECASE)
    return re.compile(re.escape(pattern))


# =============================================================================
# RULE TABLES
# =============================================================================


def _table(pairs: list[tuple[str, str]], scope: RuleScope) -> tuple[CorrectionRule, ...]:
    return tuple(CorrectionRule(pattern, replacement, scope) for pattern, replacement in pairs)


# Shape confusions produced by recognition engines
CHARACTER_RULES = _table(
    [
        ("rn", "m"),
        ("cl", "d"),
        ("ii", "ll"),
        ("0", "o"),
        ("1", "l"),
        ("5", "S"),
        ("8", "B"),
        ("vv", "w"),
        ("VV", "W"),
        ("nn", "n"),
        ("oo", "o"),
    ],
    RuleScope.CHARACTER,
)

# "h" read as "li" is the most frequent whole-word artifact
WORD_RULES = _table(
    [
        ("tlie", "the"),
        ("liave", "have"),
        ("witli", "with"),
        ("tliis", "this"),
        ("tliat", "that"),
        ("wliich", "which"),
        ("wlien", "when"),
        ("wliere", "where"),
        ("liere", "here"),
        ("tliere", "there"),
        ("liis", "his"),
        ("lier", "her"),
        ("liim", "him"),
        ("otlier", "other"),
        ("anotlier", "another"),
        ("furtlier", "further"),
    ],
    RuleScope.WORD,
)

PUNCTUATION_RULES = _table(
    [
        (",,", ","),
        ("..", "."),
        (";;", ";"),
        ("::", ":"),
        ("??", "?"),
        ("!!", "!"),
        (" ,", ","),
        (" .", "."),
        (" ;", ";"),
        (" :", ":"),
        (" ?", "?"),
        (" !", "!"),
    ],
    RuleScope.PUNCTUATION,
)

DEFAULT_RULES = CHARACTER_RULES + WORD_RULES + PUNCTUATION_RULES


def _match_case(matched: str, replacement: str) -> str:
    """Carry the case of the matched text over to the replacement."""
    if len(matched) > 1 and matched.isupper():
        return replacement.upper()
    if matched[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def apply_rule(text: str, rule: CorrectionRule) -> tuple[str, int]:
    """
    Apply one rule to text.

    Args:
        text: Text to correct.
        rule: Rule to apply.

    Returns:
        Tuple of (corrected_text, substitution_count).
    """
    pattern = rule.compile()
    if rule.scope is RuleScope.WORD:
        return pattern.subn(lambda m: _match_case(m.group(), rule.replacement), text)
    return pattern.subn(lambda m: rule.replacement, text)


# =============================================================================
# ENGINE
# =============================================================================


class CorrectionRuleEngine:
    """
    Applies ordered correction tables to raw recognised text.

    Rules are grouped by scope and the scopes always run character ->
    word -> punctuation; within a scope, rules run in table order.
    The engine is stateless after construction and never raises on
    text input.

    Attributes:
        rules: The full rule table, in application order.

    Example:
        >>> CorrectionRuleEngine().apply("witli tlie")
        'with the'
        >>> CorrectionRuleEngine(rules=()).apply("rn")
        'rn'
    """

    def __init__(self, rules: Iterable[CorrectionRule] = DEFAULT_RULES):
        """
        Initialize the engine.

        Args:
            rules: Rule table. Defaults to the built-in tables.
        """
        rules = tuple(rules)
        self.rules = tuple(
            rule for scope in SCOPE_ORDER for rule in rules if rule.scope is scope
        )

    def rules_for(self, scope: RuleScope) -> tuple[CorrectionRule, ...]:
        """Rules of one scope, in application order."""
        return tuple(rule for rule in self.rules if rule.scope is scope)

    def correct(self, text: str, scope: RuleScope | None = None) -> CorrectionResult:
        """
        Apply the rules and report which ones fired.

        Args:
            text: Raw text.
            scope: Only apply rules of this scope (all scopes if None).

        Returns:
            CorrectionResult with the corrected text and per-rule counts.
        """
        if not text:
            return CorrectionResult(original_text=text or "", corrected_text=text or "")

        rules = self.rules if scope is None else self.rules_for(scope)
        result = text
        applied: list[tuple[CorrectionRule, int]] = []
        for rule in rules:
            result, count = apply_rule(result, rule)
            if count:
                applied.append((rule, count))

        if applied:
            logger.debug(
                "Applied %d substitutions from %d rules",
                sum(count for _, count in applied),
                len(applied),
            )

        return CorrectionResult(original_text=text, corrected_text=result, applied=applied)

    def apply(self, text: str) -> str:
        """Apply every rule and return the corrected text."""
        return self.correct(text).corrected_text
