"""Root of the exception hierarchy and record-format errors.

Every package defines its own base class deriving from WikiError so that
callers can catch any application-level error with a single except clause.
"""

from typing import Optional


class WikiError(Exception):
    """Base exception for all slopopedia errors."""
    pass


class PageFormatError(WikiError):
    """Raised when a serialized page or version record has the wrong shape."""

    def __init__(self, message: str, record_field: Optional[str] = None):
        if record_field:
            full_message = f"Invalid page record field '{record_field}': {message}"
        else:
            full_message = f"Invalid page record: {message}"
        super().__init__(full_message)
        self.record_field = record_field
        self.original_message = message
