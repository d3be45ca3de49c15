"""
Pytest configuration and fixtures for docmend tests.
"""

from datetime import datetime, timezone

import pytest


class FakeOracle:
    """Deterministic dictionary oracle for spell-correction tests."""

    def __init__(self, known=(), suggestions=None):
        self.known = {w.lower() for w in known}
        self.suggestions = {k.lower(): list(v) for k, v in (suggestions or {}).items()}

    def is_misspelled(self, word):
        w = word.lower()
        if not any(c.isalpha() for c in w):
            return False
        return w not in self.known

    def suggest(self, word):
        return list(self.suggestions.get(word.lower(), []))


@pytest.fixture
def fake_oracle():
    """Oracle knowing a handful of words, with suggestions for 'wrold'."""
    return FakeOracle(
        known=["hello", "world", "this", "is", "a", "test", "the", "end"],
        suggestions={"wrold": ["world"], "xqzt": ["quiet"]},
    )


@pytest.fixture
def permissive_oracle():
    """Oracle that treats every word as correctly spelled."""

    class _Permissive:
        def is_misspelled(self, word):
            return False

        def suggest(self, word):
            return []

    return _Permissive()


@pytest.fixture(scope="session")
def fixed_time() -> datetime:
    """Fixed timestamp for deterministic front matter."""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_config():
    """Config without front matter and spell checking."""
    from docmend import ProcessingConfig

    return ProcessingConfig(include_metadata=False, enable_spell_check=False)


@pytest.fixture
def sample_records():
    """Two pages in the recognition engine's record format."""
    return [
        {
            "pageNumber": 1,
            "text": "HELLO WORLD\n\nThis is a test of the\nreconstruction pipeline.",
            "confidence": 91.5,
            "isTextOnly": False,
            "words": [{"text": "HELLO", "bbox": [0, 0, 10, 10]}],
        },
        {
            "pageNumber": 2,
            "text": "Second page text.",
            "confidence": 52.0,
        },
    ]
