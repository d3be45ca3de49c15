"""Input readers: per-page recognition records to Documents."""

from docmend.readers.pages import PageReader, read_pages

__all__ = [
    "PageReader",
    "read_pages",
]
