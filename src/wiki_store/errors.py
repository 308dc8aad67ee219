"""Typed exception hierarchy for wiki store errors.

All exceptions inherit from StoreError and include descriptive messages
with the file path and operation involved.
"""

from typing import Optional

from src.models.errors import WikiError


class StoreError(WikiError):
    """Base exception for all wiki store errors."""
    pass


class StorageError(StoreError):
    """Raised when the local storage file cannot be read, parsed or written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Storage operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
