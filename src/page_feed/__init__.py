"""Inbound page feed: pages served by the static file server.

PageFeedClient fetches the page list over HTTP; PageDirectory reads the
same page files straight from a directory.
"""

from .errors import FeedError, FeedUnavailableError
from .source import PageSource, parse_page_records
from .client import PageFeedClient
from .directory import PageDirectory

__all__ = [
    'PageSource',
    'PageFeedClient',
    'PageDirectory',
    'parse_page_records',
    'FeedError',
    'FeedUnavailableError',
]
