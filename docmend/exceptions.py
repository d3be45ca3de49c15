"""
Exception classes for docmend.

All docmend exceptions inherit from DocMendError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     result = docmend.convert(pages, config)
    ... except docmend.ConfigurationError as e:
    ...     print(f"Bad settings: {e}")
    ... except docmend.DocMendError as e:
    ...     print(f"docmend error: {e}")
"""


class DocMendError(Exception):
    """
    Base exception for all docmend errors.

    Catch this to handle any docmend-specific error.
    """

    pass


class ConfigurationError(DocMendError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> ProcessingConfig(output_format="pdf")
        ConfigurationError: output_format must be one of ('markdown', 'txt', 'html')
    """

    pass


class ProcessingCancelled(DocMendError):
    """
    Raised when a caller cancels a conversion between pipeline stages.

    Partial output is discarded; the exception carries the name of the
    last stage that completed.
    """

    def __init__(self, completed_stage: str | None = None):
        self.completed_stage = completed_stage
        if completed_stage:
            message = f"Conversion cancelled after stage '{completed_stage}'"
        else:
            message = "Conversion cancelled before any stage ran"
        super().__init__(message)
