"""Typed exceptions for the inbound page feed."""

from typing import Optional

from src.models.errors import WikiError


class FeedError(WikiError):
    """Base exception for all page feed errors."""
    pass


class FeedUnavailableError(FeedError):
    """Raised when the feed cannot be read or does not return a page list."""

    def __init__(self, source: str, reason: Optional[str] = None):
        message = f"Page feed is not available at {source}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.source = source
        self.reason = reason
