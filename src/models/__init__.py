"""Data models for wiki pages and their version snapshots."""

from src.models.errors import WikiError, PageFormatError
from src.models.page import Page
from src.models.version import Version
from src.models.timestamps import display_timestamp, format_timestamp, parse_timestamp, utc_now

__all__ = [
    'WikiError',
    'PageFormatError',
    'Page',
    'Version',
    'display_timestamp',
    'format_timestamp',
    'parse_timestamp',
    'utc_now',
]
