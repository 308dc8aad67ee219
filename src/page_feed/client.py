"""HTTP client for the static file server's page list.

The server answers ``GET /api/pages`` with a JSON array of page records,
one per JSON file in its pages directory.
"""

import logging
from typing import List

import requests
from requests.exceptions import RequestException, Timeout

from src.models import Page

from .errors import FeedUnavailableError
from .source import PageSource, parse_page_records

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "http://localhost:3000/api/pages"
DEFAULT_TIMEOUT = 10


class PageFeedClient(PageSource):
    """Fetches page records from the file server over HTTP.

    Example:
        >>> client = PageFeedClient("http://localhost:3000/api/pages")
        >>> pages = client.fetch_pages()
    """

    def __init__(self, url: str = DEFAULT_FEED_URL, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the client.

        Args:
            url: Full URL of the page list endpoint
            timeout: Seconds to wait for the server before giving up
        """
        self.url = url
        self.timeout = timeout

    def describe(self) -> str:
        return self.url

    def fetch_pages(self) -> List[Page]:
        """Fetch and parse the page list.

        Malformed records are skipped; only a failure of the feed as a whole
        raises.

        Returns:
            Parsed pages in server order

        Raises:
            FeedUnavailableError: On network errors, non-2xx responses,
                invalid JSON, or a body that is not a JSON array
        """
        logger.info(f"Fetching pages from {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except Timeout:
            raise FeedUnavailableError(self.url, f"timed out after {self.timeout}s")
        except RequestException as e:
            raise FeedUnavailableError(self.url, str(e))

        try:
            records = response.json()
        except ValueError as e:
            raise FeedUnavailableError(self.url, f"invalid JSON response: {e}")

        if not isinstance(records, list):
            raise FeedUnavailableError(
                self.url,
                f"expected a JSON array, got {type(records).__name__}"
            )

        pages = parse_page_records(records, self.url)
        logger.info(f"Fetched {len(pages)} page(s) from {self.url}")
        return pages
