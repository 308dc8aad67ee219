"""Test fixtures for wiki tests.

This module provides sample page records in the persisted/fetched shape:
- Pages with and without version history
- A legacy page that predates versioning
- Malformed records for validation tests
"""

from .sample_pages import (
    SAMPLE_PAGE_RECORD,
    SAMPLE_LEGACY_PAGE_RECORD,
    SAMPLE_TAGGED_PAGE_RECORD,
    SAMPLE_BROKEN_HISTORY_RECORD,
    SAMPLE_MALFORMED_RECORD,
    get_page_record,
)

__all__ = [
    "SAMPLE_PAGE_RECORD",
    "SAMPLE_LEGACY_PAGE_RECORD",
    "SAMPLE_TAGGED_PAGE_RECORD",
    "SAMPLE_BROKEN_HISTORY_RECORD",
    "SAMPLE_MALFORMED_RECORD",
    "get_page_record",
]
