"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class ExportFormat(str, Enum):
    """File formats offered by the export command."""

    JSON = "json"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return "json" if self is ExportFormat.JSON else "md"


class ExitCode(IntEnum):
    """Exit codes for CLI commands.

    - SUCCESS (0): Command completed successfully
    - GENERAL_ERROR (1): Invalid arguments, config problems, export failures
    - NOT_FOUND (2): The requested page or version does not exist
    - STORAGE_ERROR (3): Local storage is unreadable, corrupted or unwritable

    Example:
        >>> raise typer.Exit(ExitCode.NOT_FOUND)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_FOUND = 2
    STORAGE_ERROR = 3


@dataclass
class WikiConfig:
    """Settings read from .slopopedia/config.yaml.

    Attributes:
        storage_path: JSON file used as local storage
        storage_key: Key holding the page array inside the storage file
        feed_url: URL of the file server's page list
        feed_timeout: Seconds to wait for the feed
        pages_dir: Directory of page files; when set, sync reads it instead of feed_url
        export_dir: Directory export files are written to
    """
    storage_path: str = ".slopopedia/storage.json"
    storage_key: str = "slopopedia-pages"
    feed_url: str = "http://localhost:3000/api/pages"
    feed_timeout: float = 10
    pages_dir: Optional[str] = None
    export_dir: str = "exports"
