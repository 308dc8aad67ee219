"""Reads page records from a directory of JSON files.

Follows the file server's listing rules: every ``*.json`` file in the
directory is one page record, and a file that cannot be read or parsed is
logged and left out of the list.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from src.models import Page

from .errors import FeedUnavailableError
from .source import PageSource, parse_page_records

logger = logging.getLogger(__name__)


class PageDirectory(PageSource):
    """Page source backed by a local directory of page files."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def describe(self) -> str:
        return str(self.path)

    def list_files(self) -> List[Path]:
        """JSON files in the directory, sorted by name.

        Raises:
            FeedUnavailableError: If the directory does not exist or cannot be listed
        """
        if not self.path.is_dir():
            raise FeedUnavailableError(str(self.path), "pages directory not found")
        try:
            return sorted(p for p in self.path.iterdir() if p.suffix == '.json' and p.is_file())
        except OSError as e:
            raise FeedUnavailableError(str(self.path), str(e))

    def fetch_pages(self) -> List[Page]:
        records = []
        for file_path in self.list_files():
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    records.append(json.load(f))
            except (OSError, ValueError) as e:
                logger.error(f"Error loading {file_path.name}: {e}")

        pages = parse_page_records(records, str(self.path))
        logger.info(f"Loaded {len(pages)} page(s) from {self.path}")
        return pages

    def count_pages(self) -> int:
        """Number of page files, or 0 when the directory is unavailable."""
        try:
            return len(self.list_files())
        except FeedUnavailableError:
            return 0
