"""Unit tests for WikiStore."""

import random
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.models import Page
from src.page_feed import FeedUnavailableError, PageSource
from src.version_history import DiffSectionKind, validate_history
from src.wiki_store import PAGES_KEY, StorageError, WikiStore
from tests.fixtures import get_page_record
from tests.helpers.clock import StepClock

LATER = datetime(2024, 2, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_store(storage):
    """Store loaded with the sample, legacy and tagged pages; clock after all of them."""
    storage.set_item(PAGES_KEY, [
        get_page_record("page"),
        get_page_record("legacy"),
        get_page_record("tagged"),
    ])
    store = WikiStore(storage, clock=StepClock(start=LATER), rng=random.Random(7))
    store.load()
    return store


class TestLoadAndSave:
    """Test cases for loading and persisting the collection."""

    def test_load_empty_storage(self, store):
        """A fresh store has no pages."""
        assert store.load() == []

    def test_load_parses_records(self, seeded_store):
        """Stored records become Page objects in stored order."""
        assert [p.id for p in seeded_store.pages] == [
            "1705314600000", "1705314700000", "1705314800000",
        ]

    def test_load_rejects_non_list(self, storage):
        """The pages key must hold an array."""
        storage.set_item(PAGES_KEY, {"id": "1"})

        with pytest.raises(StorageError, match="must hold a list"):
            WikiStore(storage).load()

    def test_load_rejects_malformed_record(self, storage):
        """A bad record is reported with its position."""
        storage.set_item(PAGES_KEY, [get_page_record("page"), get_page_record("malformed")])

        with pytest.raises(StorageError, match="Page record 1"):
            WikiStore(storage).load()

    def test_custom_key(self, storage):
        """Pages are persisted under the configured key."""
        store = WikiStore(storage, key="other-pages", clock=StepClock())
        store.create_page("Home", "<p>Hi</p>")

        assert storage.get_item(PAGES_KEY) is None
        assert len(storage.get_item("other-pages")) == 1

    def test_reset_clears_pages(self, seeded_store, storage):
        """Reset removes the persisted key and the in-memory pages."""
        seeded_store.reset()

        assert seeded_store.pages == []
        assert storage.get_item(PAGES_KEY) is None


class TestCreatePage:
    """Test cases for WikiStore.create_page."""

    def test_creates_version_one(self, store):
        """A new page starts with a single initial version."""
        page = store.create_page("Home", "<p>Welcome</p>", excerpt="Front page")

        assert page.id == "1705314600000"
        assert page.created == page.updated == "2024-01-15T10:30:00.000Z"
        assert page.current_version == 1
        assert len(page.history) == 1
        assert page.history[0].changes == "Initial version"
        assert page.history[0].content == "<p>Welcome</p>"
        assert page.links == []
        assert page.tags is None

    def test_persists_immediately(self, store, storage):
        """A second store reading the same file sees the page."""
        page = store.create_page("Home", "<p>Welcome</p>")

        reloaded = WikiStore(storage)
        reloaded.load()

        assert reloaded.get_page(page.id) == page

    def test_ids_are_unique_for_same_millisecond(self, storage):
        """Colliding timestamps are bumped to the next free ID."""
        frozen = StepClock(step=timedelta(0))
        store = WikiStore(storage, clock=frozen)

        first = store.create_page("A", "a")
        second = store.create_page("B", "b")

        assert first.id == "1705314600000"
        assert second.id == "1705314600001"

    def test_tags_are_deduplicated(self, store):
        page = store.create_page("T", "c", tags=["a", "b", "a"])

        assert page.tags == ["a", "b"]

    def test_sample_page(self, store):
        """The sample page carries the canned title and excerpt."""
        page = store.create_sample_page()

        assert page.title == "Sample Page"
        assert page.excerpt == "A sample page demonstrating wiki functionality"
        assert page.current_version == 1


class TestUpdatePage:
    """Test cases for WikiStore.update_page."""

    def test_edit_appends_version(self, store):
        """Each edit adds one version and the page mirrors it."""
        page = store.create_page("Home", "<p>v1</p>")

        store.update_page(page.id, content="<p>v2</p>", changes="Second draft")

        assert page.current_version == 2
        assert page.content == "<p>v2</p>"
        assert page.history[-1].changes == "Second draft"
        assert page.updated == "2024-01-15T10:31:00.000Z"

    def test_unknown_page_returns_none(self, store):
        """Editing a missing page is a no-op."""
        assert store.update_page("nope", title="X") is None

    def test_edit_persists(self, store, storage):
        page = store.create_page("Home", "<p>v1</p>")
        store.update_page(page.id, title="Start")

        stored = storage.get_item(PAGES_KEY)[0]
        assert stored["title"] == "Start"
        assert stored["currentVersion"] == 2
        assert len(stored["history"]) == 2

    def test_legacy_page_gains_history(self, seeded_store):
        """The first edit of a legacy page yields versions 1 and 2."""
        page = seeded_store.update_page("1705314700000", content="<p>Line one</p>")

        assert [v.version for v in page.history] == [1, 2]
        assert page.history[0].changes == "Initial version"

    def test_replaces_tags_and_links(self, seeded_store):
        page = seeded_store.update_page(
            "1705314800000", tags=["python", "python", "howto"], links=["1705314600000"]
        )

        assert page.tags == ["python", "howto"]
        assert page.links == ["1705314600000"]

    def test_edit_before_latest_version_takes_its_timestamp(self, storage):
        """An edit dated before the latest version is stamped with that version's time."""
        storage.set_item(PAGES_KEY, [get_page_record("page")])
        store = WikiStore(storage, clock=StepClock())
        store.load()

        page = store.update_page("1705314600000", title="Too early")

        assert page.current_version == 3
        assert page.history[-1].updated == "2024-01-16T09:00:00.000Z"
        assert page.updated == "2024-01-16T09:00:00.000Z"
        validate_history(page)
        assert storage.get_item(PAGES_KEY)[0]["currentVersion"] == 3

    def test_future_dated_fetched_page_stays_editable(self, store, storage):
        """A fetched page written by a clock far ahead of ours can still be edited."""
        record = get_page_record("tagged")
        record["created"] = record["updated"] = "2030-01-01T00:00:00.000Z"
        record["history"][0]["updated"] = "2030-01-01T00:00:00.000Z"
        store.merge_fetched_pages([Page.from_dict(record)])

        page = store.update_page("1705314800000", content="<p>Edited today</p>")
        page = store.update_page("1705314800000", title="Edited again")

        assert [v.updated for v in page.history] == ["2030-01-01T00:00:00.000Z"] * 3
        assert page.content == "<p>Edited today</p>"
        validate_history(page)
        assert storage.get_item(PAGES_KEY)[0]["currentVersion"] == 3

    def test_edit_sequences_keep_history_consistent(self, seeded_store):
        """After every edit currentVersion equals the history length."""
        created = seeded_store.create_page("Scratch", "<p>v1</p>")
        edits = [
            {"content": "<p>v2</p>"},
            {"title": "Scratch pad", "changes": "Renamed"},
            {"excerpt": "Notes"},
            {"tags": ["misc"]},
            {"links": ["1705314600000"]},
            {"title": "Pad", "content": "<p>v3</p>", "excerpt": ""},
        ]

        for page_id in (created.id, "1705314700000"):
            for edit in edits:
                page = seeded_store.update_page(page_id, **edit)

                assert page.current_version == len(page.history)
                validate_history(page)

            assert page.current_version == len(edits) + 1
            assert [v.version for v in page.history] == list(range(1, len(edits) + 2))


class TestLinks:
    """Test cases for linking pages."""

    def test_link_does_not_append_version(self, store):
        """Linking is not an edit."""
        a = store.create_page("A", "a")
        b = store.create_page("B", "b")

        store.link_pages(a.id, b.id)

        assert a.links == [b.id]
        assert a.current_version == 1
        assert len(a.history) == 1

    def test_link_is_idempotent(self, store):
        a = store.create_page("A", "a")
        b = store.create_page("B", "b")

        store.link_pages(a.id, b.id)
        store.link_pages(a.id, b.id)

        assert a.links == [b.id]

    def test_link_touches_updated(self, store):
        a = store.create_page("A", "a")
        before = a.updated

        store.link_pages(a.id, "1999")

        assert a.updated > before

    def test_link_from_missing_page(self, store):
        assert store.link_pages("nope", "1") is None

    def test_resolve_links_skips_dangling(self, store):
        """Links to deleted or unknown pages are left out."""
        a = store.create_page("A", "a")
        b = store.create_page("B", "b")
        store.link_pages(a.id, "missing")
        store.link_pages(a.id, b.id)

        assert store.resolve_links(a) == [b]


class TestVersions:
    """Test cases for version lookups and comparison."""

    def test_get_version(self, seeded_store):
        version = seeded_store.get_version("1705314600000", 1)

        assert version.content == "<h2>Welcome</h2>\n<p>First steps.</p>"

    def test_get_version_missing(self, seeded_store):
        assert seeded_store.get_version("1705314600000", 9) is None
        assert seeded_store.get_version("nope", 1) is None

    def test_history_entries(self, seeded_store):
        entries = seeded_store.history_entries("1705314600000")

        assert [e.version for e in entries] == [2, 1]
        assert seeded_store.history_entries("nope") is None

    def test_compare_with_previous_by_default(self, seeded_store):
        """Comparing version 2 diffs it against version 1."""
        result = seeded_store.compare_versions("1705314600000", 2)

        assert result.old_version == 1
        content = result.section(DiffSectionKind.CONTENT_CHANGE)
        assert [line.text for line in content.lines] == ["&lt;p&gt;Second steps.&lt;/p&gt;"]

    def test_compare_arbitrary_versions(self, store):
        page = store.create_page("A", "one")
        store.update_page(page.id, content="two")
        store.update_page(page.id, content="three")

        result = store.compare_versions(page.id, 3, 1)

        assert (result.old_version, result.new_version) == (1, 3)

    def test_compare_missing_version(self, seeded_store):
        """Version 1 has no predecessor to compare with."""
        assert seeded_store.compare_versions("1705314600000", 1) is None
        assert seeded_store.compare_versions("nope", 2) is None


class TestBrowsing:
    """Test cases for search, tags and random selection."""

    def test_search_matches_title_and_content(self, seeded_store):
        """Search is case-insensitive over title and raw content."""
        titles = [p.title for p in seeded_store.search_pages("STEPS")]
        assert titles == ["Getting Started"]

        titles = [p.title for p in seeded_store.search_pages("notes")]
        assert titles == ["Old Notes"]

    def test_search_matches_markup(self, seeded_store):
        """Content is searched with its markup."""
        results = seeded_store.search_pages("<strong>")

        assert [p.title for p in results] == ["Python Tips"]

    def test_blank_search_returns_nothing(self, seeded_store):
        assert seeded_store.search_pages("   ") == []

    def test_filter_by_tag(self, seeded_store):
        assert [p.id for p in seeded_store.filter_by_tag("python")] == ["1705314800000"]
        assert seeded_store.filter_by_tag("rust") == []

    def test_random_page_from_collection(self, seeded_store):
        assert seeded_store.random_page() in seeded_store.pages

    def test_random_page_empty(self, store):
        assert store.random_page() is None


class TestFetchedPages:
    """Test cases for merging pages from the feed."""

    def test_fetched_page_replaces_local_copy(self, seeded_store):
        """On an ID collision the fetched page wins, in place."""
        record = get_page_record("tagged")
        record["title"] = "Python Tips (server)"
        fetched = Page.from_dict(record)

        summary = seeded_store.merge_fetched_pages([fetched])

        assert summary.replaced == ["1705314800000"]
        assert seeded_store.pages[2].title == "Python Tips (server)"
        assert len(seeded_store.pages) == 3

    def test_new_pages_are_appended(self, store):
        fetched = Page.from_dict(get_page_record("page"))

        summary = store.merge_fetched_pages([fetched])

        assert summary.added == ["1705314600000"]
        assert store.pages == [fetched]

    def test_broken_history_is_skipped(self, store):
        broken = Page.from_dict(get_page_record("broken"))

        summary = store.merge_fetched_pages([broken])

        assert summary.skipped == ["1705314900000"]
        assert store.pages == []

    def test_legacy_pages_are_accepted(self, store):
        legacy = Page.from_dict(get_page_record("legacy"))

        summary = store.merge_fetched_pages([legacy])

        assert summary.added == ["1705314700000"]

    def test_repeated_ids_are_counted_once(self, seeded_store):
        """A feed listing an ID twice yields one entry per ID; the last copy wins."""
        first = get_page_record("tagged")
        second = get_page_record("tagged")
        second["title"] = "Python Tips (second copy)"
        new_first = get_page_record("page")
        new_first["id"] = "1705315000000"
        new_second = dict(new_first, title="New page (second copy)")
        fetched = [Page.from_dict(r) for r in (first, new_first, second, new_second)]

        summary = seeded_store.merge_fetched_pages(fetched)

        assert summary.replaced == ["1705314800000"]
        assert summary.added == ["1705315000000"]
        assert summary.skipped == []
        assert len(seeded_store.pages) == 4
        assert seeded_store.pages[2].title == "Python Tips (second copy)"
        assert seeded_store.pages[3].title == "New page (second copy)"

    def test_valid_copy_after_broken_copy_is_added(self, store):
        broken = get_page_record("broken")
        valid = get_page_record("legacy")
        valid["id"] = broken["id"]

        summary = store.merge_fetched_pages(
            [Page.from_dict(broken), Page.from_dict(valid)]
        )

        assert summary.added == [broken["id"]]
        assert summary.skipped == []

    def test_load_file_based_pages_merges_and_saves(self, store, storage):
        source = Mock(spec=PageSource)
        source.fetch_pages.return_value = [Page.from_dict(get_page_record("page"))]

        summary = store.load_file_based_pages(source)

        assert summary.added == ["1705314600000"]
        assert storage.get_item(PAGES_KEY)[0]["id"] == "1705314600000"

    def test_unavailable_feed_keeps_local_pages(self, seeded_store, storage):
        """A failing feed is not fatal and local pages are still saved."""
        source = Mock(spec=PageSource)
        source.fetch_pages.side_effect = FeedUnavailableError(
            "http://localhost:3000/api/pages", "connection refused"
        )

        summary = seeded_store.load_file_based_pages(source)

        assert summary is None
        assert len(seeded_store.pages) == 3
        assert len(storage.get_item(PAGES_KEY)) == 3
