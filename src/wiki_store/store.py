"""Repository object owning the wiki page collection.

The WikiStore keeps the in-memory list of pages, persists it through a
LocalStorage file under a single well-known key, and routes every edit
through the version store so the page record and its history stay in
sync.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from src.models import Page, PageFormatError, Version, format_timestamp, utc_now
from src.page_feed.errors import FeedError
from src.page_feed.source import PageSource
from src.version_history import (
    DiffEngine,
    HistoryEntry,
    HistoryIntegrityError,
    PageUpdate,
    VersionDiff,
    append_version,
    get_version,
    history_entries,
    initial_version,
    validate_history,
)

from .errors import StorageError
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)

PAGES_KEY = "slopopedia-pages"

SAMPLE_PAGE_TITLE = "Sample Page"
SAMPLE_PAGE_CONTENT = (
    "This is a sample page created to demonstrate the wiki functionality. "
    "It contains some basic content and can be linked to other pages."
)
SAMPLE_PAGE_EXCERPT = "A sample page demonstrating wiki functionality"


@dataclass
class MergeSummary:
    """Outcome of merging fetched pages into the local collection.

    Attributes:
        added: IDs of pages that were not present locally
        replaced: IDs of local pages overwritten by the fetched copy
        skipped: IDs of fetched pages rejected for a broken history
    """
    added: List[str] = field(default_factory=list)
    replaced: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class WikiStore:
    """Owns the page collection and its persistence.

    Lookups for unknown pages or versions return None rather than raising;
    callers branch on presence.

    Example:
        >>> store = WikiStore(LocalStorage(".slopopedia/storage.json"))
        >>> store.load()
        >>> page = store.create_page("Home", "<p>Welcome</p>")
        >>> store.update_page(page.id, content="<p>Hello</p>", changes="Greeting")
    """

    def __init__(
        self,
        storage: LocalStorage,
        key: str = PAGES_KEY,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        diff_engine: Optional[DiffEngine] = None,
    ):
        """Initialize the store without reading storage.

        Args:
            storage: Key-value backend holding the serialized pages
            key: Storage key for the page array
            clock: Source of the current time
            rng: Random generator used by random_page
            diff_engine: Engine used by compare_versions
        """
        self.storage = storage
        self.key = key
        self.pages: List[Page] = []
        self._clock = clock
        self._rng = rng or random.Random()
        self._diff_engine = diff_engine or DiffEngine()

    # Persistence

    def load(self) -> List[Page]:
        """Replace the in-memory collection with the persisted pages.

        Returns:
            The loaded pages

        Raises:
            StorageError: If the stored value is not a list of valid page records
        """
        stored = self.storage.get_item(self.key)
        if stored is None:
            self.pages = []
            return self.pages

        if not isinstance(stored, list):
            raise StorageError(
                str(self.storage.path),
                'parse',
                f"Key '{self.key}' must hold a list, got {type(stored).__name__}"
            )

        pages = []
        for index, record in enumerate(stored):
            try:
                pages.append(Page.from_dict(record))
            except PageFormatError as e:
                raise StorageError(
                    str(self.storage.path), 'parse', f"Page record {index}: {e}"
                ) from e

        self.pages = pages
        logger.info(f"Loaded {len(pages)} page(s) from {self.storage.path}")
        return self.pages

    def save(self) -> None:
        """Write the whole collection back under the pages key."""
        self.storage.set_item(self.key, [page.to_dict() for page in self.pages])

    def reset(self) -> None:
        """Remove all persisted pages and clear the collection."""
        self.storage.remove_item(self.key)
        self.pages = []
        logger.info("Removed all persisted pages")

    # Page operations

    def get_page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def create_page(
        self,
        title: str,
        content: str,
        excerpt: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> Page:
        """Create a page with version 1 recording its initial state.

        The page ID is the creation time in epoch milliseconds, bumped until
        it is unique within the collection.
        """
        now = self._clock()
        timestamp = format_timestamp(now)

        page = Page(
            id=self._new_page_id(now),
            title=title,
            content=content,
            created=timestamp,
            updated=timestamp,
            excerpt=excerpt,
            tags=_unique(tags) if tags is not None else None,
            links=[],
            current_version=1,
        )
        page.history.append(initial_version(page))

        self.pages.append(page)
        self.save()
        logger.info(f"Created page {page.id} '{page.title}'")
        return page

    def create_sample_page(self) -> Page:
        return self.create_page(SAMPLE_PAGE_TITLE, SAMPLE_PAGE_CONTENT, SAMPLE_PAGE_EXCERPT)

    def update_page(
        self,
        page_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        excerpt: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        links: Optional[Iterable[str]] = None,
        changes: Optional[str] = None,
    ) -> Optional[Page]:
        """Apply an edit by appending a new version.

        Returns:
            The updated page, or None if no page has this ID

        Raises:
            HistoryIntegrityError: If the resulting history breaks the log invariants
        """
        page = self.get_page(page_id)
        if page is None:
            logger.debug(f"Update skipped, page {page_id} not found")
            return None

        update = PageUpdate(
            title=title,
            content=content,
            excerpt=excerpt,
            tags=_unique(tags) if tags is not None else None,
            links=_unique(links) if links is not None else None,
        )
        version = append_version(
            page, update, format_timestamp(self._clock()), changes=changes
        )
        validate_history(page)

        self.save()
        logger.info(f"Page {page.id} now at version {version.version}")
        return page

    def link_pages(self, from_page_id: str, to_page_id: str) -> Optional[Page]:
        """Add an outbound link from one page to another.

        Linking is not an edit: no version is appended. The target is not
        required to exist.

        Returns:
            The source page, or None if it does not exist
        """
        page = self.get_page(from_page_id)
        if page is None:
            return None

        if to_page_id not in page.links:
            page.links.append(to_page_id)
            page.updated = format_timestamp(self._clock())
            self.save()
            logger.info(f"Linked page {from_page_id} -> {to_page_id}")
        return page

    def resolve_links(self, page: Page) -> List[Page]:
        """Linked pages in link order, with dangling IDs omitted."""
        resolved = []
        for target_id in page.links:
            target = self.get_page(target_id)
            if target is None:
                logger.debug(f"Page {page.id} links to missing page {target_id}")
                continue
            resolved.append(target)
        return resolved

    # Version operations

    def get_version(self, page_id: str, version_number: int) -> Optional[Version]:
        page = self.get_page(page_id)
        if page is None:
            return None
        return get_version(page, version_number)

    def history_entries(self, page_id: str) -> Optional[List[HistoryEntry]]:
        page = self.get_page(page_id)
        if page is None:
            return None
        return history_entries(page)

    def compare_versions(
        self,
        page_id: str,
        new_version_number: int,
        old_version_number: Optional[int] = None,
    ) -> Optional[VersionDiff]:
        """Diff two versions of a page.

        Args:
            page_id: Page to compare
            new_version_number: Version treated as "after"
            old_version_number: Version treated as "before" (default: previous)

        Returns:
            The diff, or None if the page or either version is missing
        """
        if old_version_number is None:
            old_version_number = new_version_number - 1

        new_version = self.get_version(page_id, new_version_number)
        old_version = self.get_version(page_id, old_version_number)
        if new_version is None or old_version is None:
            return None
        return self._diff_engine.generate_diff(old_version, new_version)

    # Browsing

    def search_pages(self, query: str) -> List[Page]:
        """Pages whose title or content contains query, case-insensitively."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            page for page in self.pages
            if needle in page.title.lower() or needle in page.content.lower()
        ]

    def filter_by_tag(self, tag: str) -> List[Page]:
        return [page for page in self.pages if page.tags and tag in page.tags]

    def random_page(self) -> Optional[Page]:
        if not self.pages:
            return None
        return self._rng.choice(self.pages)

    # Fetched feed

    def merge_fetched_pages(self, fetched: Iterable[Page]) -> MergeSummary:
        """Merge fetched pages into the collection; the fetched copy wins.

        A fetched page replaces the local page with the same ID in place and
        pages with new IDs are appended. Fetched pages whose history breaks
        the log invariants are skipped. Pages without any history are
        accepted and repaired on their first edit.

        An ID repeated in the feed is merged each time (the last valid copy
        wins) but counted once in the summary, by its final outcome.
        """
        positions = {page.id: index for index, page in enumerate(self.pages)}
        local_ids = set(positions)
        outcomes: Dict[str, str] = {}

        for page in fetched:
            if page.history:
                try:
                    validate_history(page)
                except HistoryIntegrityError as e:
                    logger.warning(f"Skipping fetched page: {e}")
                    outcomes.setdefault(page.id, 'skipped')
                    continue

            if page.id in positions:
                self.pages[positions[page.id]] = page
            else:
                positions[page.id] = len(self.pages)
                self.pages.append(page)
            outcomes[page.id] = 'replaced' if page.id in local_ids else 'added'

        summary = MergeSummary()
        for page_id, outcome in outcomes.items():
            getattr(summary, outcome).append(page_id)

        logger.info(
            f"Merged fetched pages: {len(summary.added)} added, "
            f"{len(summary.replaced)} replaced, {len(summary.skipped)} skipped"
        )
        return summary

    def load_file_based_pages(self, source: PageSource) -> Optional[MergeSummary]:
        """Fetch pages from a feed source and merge them, then persist.

        A failing source is not fatal: the local pages are kept as they are.

        Returns:
            The merge summary, or None if the source could not be read
        """
        summary = None
        try:
            fetched = source.fetch_pages()
        except FeedError as e:
            logger.warning(f"Could not load pages from feed, using local storage only: {e}")
        else:
            summary = self.merge_fetched_pages(fetched)

        self.save()
        return summary

    def _new_page_id(self, now: datetime) -> str:
        candidate = int(now.timestamp() * 1000)
        existing = {page.id for page in self.pages}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))
