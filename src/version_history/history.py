"""Append-only version log for wiki pages.

Each edit appends exactly one Version to the page history and overwrites
the page's current fields so that the page record always mirrors the
latest snapshot. Prior versions are never modified or removed.
"""

import logging
from typing import List, Optional

from src.models import Page, Version, parse_timestamp

from .errors import HistoryIntegrityError
from .models import HistoryEntry, PageUpdate

logger = logging.getLogger(__name__)

INITIAL_VERSION_DESCRIPTION = "Initial version"
DEFAULT_CHANGE_DESCRIPTION = "Updated content"


def initial_version(page: Page) -> Version:
    """Synthesize version 1 from a page's current fields.

    The snapshot is stamped with the page's creation time.
    """
    return Version(
        version=1,
        title=page.title,
        content=page.content,
        excerpt=page.excerpt,
        updated=page.created,
        changes=INITIAL_VERSION_DESCRIPTION,
    )


def append_version(
    page: Page,
    update: PageUpdate,
    timestamp: str,
    changes: Optional[str] = None,
) -> Version:
    """Append a new version to the page and sync the page's current fields.

    Pages that predate versioning get version 1 synthesized from their
    current fields before the new version is appended.

    The new snapshot takes each of title/content/excerpt from the update
    when provided, otherwise from the page's current value (not from the
    previous version).

    A timestamp earlier than the latest version is raised to that
    version's timestamp so the log stays non-decreasing.

    Args:
        page: Page to edit in place
        update: Proposed field updates
        timestamp: ISO 8601 time of the edit
        changes: Change description (defaults to "Updated content")

    Returns:
        The appended Version

    Raises:
        HistoryIntegrityError: If a stored timestamp cannot be parsed
    """
    if not page.history:
        logger.info(f"Page {page.id} has no history, synthesizing initial version")
        page.history.append(initial_version(page))

    latest = page.history[-1]
    if _is_earlier(timestamp, latest.updated, page.id):
        # Latest version comes from a clock running ahead of ours
        logger.warning(
            f"Edit time {timestamp} precedes version {latest.version} of page "
            f"{page.id} ({latest.updated}), stamping with {latest.updated}"
        )
        timestamp = latest.updated

    version = Version(
        version=len(page.history) + 1,
        title=update.title if update.title is not None else page.title,
        content=update.content if update.content is not None else page.content,
        excerpt=update.excerpt if update.excerpt is not None else page.excerpt,
        updated=timestamp,
        changes=changes or DEFAULT_CHANGE_DESCRIPTION,
    )
    page.history.append(version)

    page.title = version.title
    page.content = version.content
    page.excerpt = version.excerpt
    if update.tags is not None:
        page.tags = list(update.tags)
    if update.links is not None:
        page.links = list(update.links)
    page.updated = timestamp
    page.current_version = version.version

    logger.debug(f"Appended version {version.version} to page {page.id}")
    return version


def get_version(page: Page, version_number: int) -> Optional[Version]:
    """Find a snapshot by version number, or None if absent."""
    for version in page.history:
        if version.version == version_number:
            return version
    return None


def history_entries(page: Page) -> List[HistoryEntry]:
    """List the page history newest first for display."""
    current = page.current_version or len(page.history)
    return [
        HistoryEntry(
            version=version.version,
            updated=version.updated,
            changes=version.changes,
            is_current=version.version == current,
            can_view=True,
            can_compare=version.version > 1,
        )
        for version in reversed(page.history)
    ]


def validate_history(page: Page) -> None:
    """Check the append-only log invariants of a page.

    The history must be non-empty, numbered exactly 1..n, end at the page's
    currentVersion, and carry non-decreasing timestamps.

    Raises:
        HistoryIntegrityError: On the first violated invariant
    """
    if not page.history:
        raise HistoryIntegrityError(page.id, "history is empty")

    previous: Optional[Version] = None
    for position, version in enumerate(page.history, start=1):
        if version.version != position:
            raise HistoryIntegrityError(
                page.id,
                f"expected version {position} at position {position}, "
                f"found {version.version}"
            )
        if previous is not None and _is_earlier(version.updated, previous.updated, page.id):
            raise HistoryIntegrityError(
                page.id,
                f"version {version.version} is dated before version {previous.version}"
            )
        previous = version

    if page.current_version != len(page.history):
        raise HistoryIntegrityError(
            page.id,
            f"currentVersion is {page.current_version} but latest version is "
            f"{len(page.history)}"
        )


def _is_earlier(candidate: str, reference: str, page_id: str) -> bool:
    try:
        return parse_timestamp(candidate) < parse_timestamp(reference)
    except ValueError as e:
        raise HistoryIntegrityError(page_id, f"unparseable timestamp: {e}") from e
