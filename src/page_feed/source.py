"""Common interface for page feed sources."""

import logging
from typing import Any, Iterable, List

from src.models import Page, PageFormatError

logger = logging.getLogger(__name__)


class PageSource:
    """A place pages can be fetched from.

    Subclasses implement fetch_pages() and raise FeedError when the source
    itself cannot be read.
    """

    def fetch_pages(self) -> List[Page]:
        raise NotImplementedError

    def describe(self) -> str:
        return self.__class__.__name__


def parse_page_records(records: Iterable[Any], origin: str) -> List[Page]:
    """Convert raw records into Pages, skipping malformed ones with a warning."""
    pages = []
    for index, record in enumerate(records):
        try:
            pages.append(Page.from_dict(record))
        except PageFormatError as e:
            logger.warning(f"Skipping page record {index} from {origin}: {e}")
    return pages
