"""Typed exceptions for version history errors."""

from src.models.errors import WikiError


class VersionHistoryError(WikiError):
    """Base exception for all version history errors."""
    pass


class HistoryIntegrityError(VersionHistoryError):
    """Raised when a page history breaks the append-only log invariants."""

    def __init__(self, page_id: str, reason: str):
        super().__init__(f"History of page {page_id} is inconsistent: {reason}")
        self.page_id = page_id
        self.reason = reason
