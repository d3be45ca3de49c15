"""
docmend: Rebuild clean Markdown from noisy, page-fragmented OCR text.

This library takes the per-page output of a recognition engine (raw
text plus a confidence score), repairs common recognition artifacts,
reassembles wrapped paragraphs, detects headings, lists, tables and
code, and renders one structurally sound Markdown document.

Example:
    >>> import docmend
    >>> result = docmend.convert([
    ...     {"pageNumber": 1, "text": "HELLO WORLD\\n\\nThis is a test.", "confidence": 88},
    ... ])
    >>> print(result.markdown)
    >>> result.save("output.md")
"""

from docmend.config import ProcessingConfig
from docmend.convert import (
    PIPELINE_STAGES,
    PipelineOrchestrator,
    __version__,
    convert,
    convert_batch,
    convert_to_markdown,
)
from docmend.exceptions import (
    ConfigurationError,
    DocMendError,
    ProcessingCancelled,
)
from docmend.models import (
    # Output
    ConversionResult,
    # Input
    Document,
    # Line stream
    Heading,
    LineKind,
    ListItem,
    ListKind,
    LogicalLine,
    Page,
)
from docmend.readers import read_pages

__all__ = [
    # Main API
    "convert",
    "convert_to_markdown",
    "convert_batch",
    "read_pages",
    "PipelineOrchestrator",
    "PIPELINE_STAGES",
    # Configuration
    "ProcessingConfig",
    # Models
    "Page",
    "Document",
    "LogicalLine",
    "LineKind",
    "Heading",
    "ListItem",
    "ListKind",
    "ConversionResult",
    # Exceptions
    "DocMendError",
    "ConfigurationError",
    "ProcessingCancelled",
    "__version__",
]
