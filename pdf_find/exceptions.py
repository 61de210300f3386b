# exceptions.py
"""Exceptions raised by pdf_find and by the page-text sources it ships."""

from typing import Optional


class FindError(Exception):
    """Base class for pdf_find errors.

    Attributes:
        message: Human-readable description.
        original_error: The underlying exception, if one was wrapped.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class PageTextError(FindError):
    """A page-text source could not produce the text of one page."""

    def __init__(self, page_index: int, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error)
        self.page_index = page_index
