"""Markdown output for reconstructed documents."""

from docmend.renderers.markdown import (
    NO_CONTENT_PLACEHOLDER,
    DocumentRenderer,
    RenderOptions,
    final_cleanup,
    format_inline,
)

__all__ = [
    "DocumentRenderer",
    "RenderOptions",
    "format_inline",
    "final_cleanup",
    "NO_CONTENT_PLACEHOLDER",
]
