"""Typed exceptions for export errors."""

from typing import Optional

from src.models.errors import WikiError


class ExportError(WikiError):
    """Raised when pages cannot be exported or an export cannot be read back."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        if file_path:
            message = f"{message} ({file_path})"
        super().__init__(message)
        self.file_path = file_path
