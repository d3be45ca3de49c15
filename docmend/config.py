"""
Configuration for docmend text reconstruction.

The recognised settings are exactly the fields of ProcessingConfig;
anything else handed to ProcessingConfig.from_dict is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Literal

from docmend.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_OCR_LANGUAGES = ("eng", "spa", "fra", "deu")
SUPPORTED_OUTPUT_FORMATS = ("markdown", "txt", "html")

# External (camelCase) setting names -> dataclass field names
_SETTING_ALIASES = {
    "ocrLanguage": "ocr_language",
    "confidenceThreshold": "confidence_threshold",
    "preserveLayout": "preserve_layout",
    "enableSpellCheck": "enable_spell_check",
    "aggressiveCorrection": "aggressive_correction",
    "customDictionary": "custom_dictionary",
    "outputFormat": "output_format",
    "includeMetadata": "include_metadata",
    "preserveFormatting": "preserve_formatting",
    "includeTableOfContents": "include_table_of_contents",
}


def parse_custom_dictionary(terms: str | Iterable[str] | None) -> frozenset[str]:
    """
    Parse a custom dictionary into a case-folded set of terms.

    Args:
        terms: Newline-delimited string, or an iterable of terms.

    Returns:
        Frozen set of stripped, lower-cased, non-empty terms.

    Example:
        >>> sorted(parse_custom_dictionary("Dasein\\n  Kant \\n"))
        ['dasein', 'kant']
    """
    if terms is None:
        return frozenset()
    if isinstance(terms, str):
        terms = terms.split("\n")
    return frozenset(term.strip().lower() for term in terms if term and term.strip())


@dataclass
class ProcessingConfig:
    """
    Configuration for a document conversion.

    All options have the same defaults as the desktop application the
    pipeline was built for. Create a config only if you need to customize
    behavior.

    Example:
        >>> config = ProcessingConfig(
        ...     aggressive_correction=True,
        ...     custom_dictionary="Dasein\\nZuhandenheit",
        ... )
        >>> result = docmend.convert(pages, config)
    """

    # Informational only; the recognition engine runs elsewhere
    ocr_language: str = "eng"

    # Pages under this confidence are flagged in the result, never dropped
    confidence_threshold: float = 60.0

    # Keep table-like and indented code lines standalone during reconstruction
    preserve_layout: bool = True

    # Spell correction
    enable_spell_check: bool = True
    aggressive_correction: bool = False
    custom_dictionary: frozenset[str] = field(default_factory=frozenset)

    # Output options
    output_format: Literal["markdown", "txt", "html"] = "markdown"
    include_metadata: bool = True
    preserve_formatting: bool = True  # inline bold / link pass
    include_table_of_contents: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if not isinstance(self.custom_dictionary, frozenset):
            self.custom_dictionary = parse_custom_dictionary(self.custom_dictionary)

        if self.ocr_language not in SUPPORTED_OCR_LANGUAGES:
            raise ConfigurationError(
                f"ocr_language must be one of {SUPPORTED_OCR_LANGUAGES}, "
                f"got {self.ocr_language!r}"
            )

        try:
            self.confidence_threshold = float(self.confidence_threshold)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"confidence_threshold must be a number, got {self.confidence_threshold!r}"
            ) from e
        if self.confidence_threshold < 0.0 or self.confidence_threshold > 100.0:
            raise ConfigurationError(
                f"confidence_threshold must be between 0 and 100, "
                f"got {self.confidence_threshold}"
            )

        if self.output_format not in SUPPORTED_OUTPUT_FORMATS:
            raise ConfigurationError(
                f"output_format must be one of {SUPPORTED_OUTPUT_FORMATS}, "
                f"got {self.output_format!r}"
            )

    @classmethod
    def from_dict(cls, settings: Mapping[str, Any]) -> ProcessingConfig:
        """
        Build a config from a settings mapping.

        Accepts both the camelCase names used by the settings store
        (``enableSpellCheck``) and the Python field names
        (``enable_spell_check``). Unrecognised keys are logged and ignored.

        Args:
            settings: Mapping of setting name to value.

        Returns:
            Validated ProcessingConfig.

        Raises:
            ConfigurationError: If a recognised setting has an invalid value.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in settings.items():
            name = _SETTING_ALIASES.get(key, key)
            if name not in known:
                logger.warning("Ignoring unrecognised setting %r", key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary using the external camelCase names."""
        reverse = {name: alias for alias, name in _SETTING_ALIASES.items()}
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "custom_dictionary":
                value = sorted(value)
            data[reverse[f.name]] = value
        return data
