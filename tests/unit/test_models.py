"""Unit tests for models module."""

from datetime import datetime, timezone

import pytest

from src.models import Page, PageFormatError, Version, WikiError
from src.models.timestamps import display_timestamp, format_timestamp, parse_timestamp
from tests.fixtures import get_page_record


class TestVersion:
    """Test cases for Version dataclass."""

    def test_version_from_dict(self):
        """Version can be built from a history entry record."""
        record = get_page_record("page")["history"][1]

        version = Version.from_dict(record)

        assert version.version == 2
        assert version.title == "Getting Started"
        assert version.changes == "Added second steps"
        assert version.updated == "2024-01-16T09:00:00.000Z"

    def test_version_to_dict_matches_record(self):
        """to_dict produces the persisted history entry shape."""
        record = get_page_record("page")["history"][0]

        assert Version.from_dict(record).to_dict() == record

    def test_version_is_immutable(self):
        """Versions are frozen snapshots."""
        version = Version(1, "T", "C", None, "2024-01-15T10:30:00.000Z", "Initial version")

        with pytest.raises(AttributeError):
            version.title = "Changed"

    def test_version_rejects_non_integer_number(self):
        """A string version number raises PageFormatError."""
        record = get_page_record("page")["history"][0]
        record["version"] = "1"

        with pytest.raises(PageFormatError) as exc_info:
            Version.from_dict(record)

        assert exc_info.value.record_field == "history.version"

    def test_version_rejects_boolean_number(self):
        """True is not accepted as version 1."""
        record = get_page_record("page")["history"][0]
        record["version"] = True

        with pytest.raises(PageFormatError):
            Version.from_dict(record)

    def test_version_missing_changes_defaults_to_empty(self):
        """A history entry without a change note is accepted."""
        record = get_page_record("page")["history"][0]
        del record["changes"]

        assert Version.from_dict(record).changes == ""

    def test_version_rejects_non_iso_timestamp(self):
        record = get_page_record("page")["history"][1]
        record["updated"] = "16/01/2024 09:00"

        with pytest.raises(PageFormatError) as exc_info:
            Version.from_dict(record)

        assert exc_info.value.record_field == "history.updated"


class TestPage:
    """Test cases for Page dataclass."""

    def test_page_from_dict(self):
        """Page parses all fields of a full record."""
        page = Page.from_dict(get_page_record("page"))

        assert page.id == "1705314600000"
        assert page.title == "Getting Started"
        assert page.excerpt == "How to begin"
        assert page.links == ["1705314700000"]
        assert page.current_version == 2
        assert len(page.history) == 2
        assert page.tags is None

    def test_page_round_trip_is_identical(self):
        """from_dict followed by to_dict reproduces the record."""
        for name in ("page", "tagged", "legacy"):
            record = get_page_record(name)
            page = Page.from_dict(record)

            assert Page.from_dict(page.to_dict()) == page

    def test_tags_key_omitted_when_untagged(self):
        """to_dict leaves out tags for a page that was never tagged."""
        page = Page.from_dict(get_page_record("page"))

        assert "tags" not in page.to_dict()

    def test_tags_key_present_when_tagged(self):
        """to_dict keeps the tag list of a tagged page."""
        page = Page.from_dict(get_page_record("tagged"))

        assert page.to_dict()["tags"] == ["python", "tips"]

    def test_legacy_page_has_empty_history(self):
        """A record without history loads with no versions and no current version."""
        page = Page.from_dict(get_page_record("legacy"))

        assert page.history == []
        assert page.current_version is None
        assert page.has_history is False

    def test_has_history_requires_more_than_one_version(self):
        """has_history is False for a single-version page."""
        assert Page.from_dict(get_page_record("tagged")).has_history is False
        assert Page.from_dict(get_page_record("page")).has_history is True

    def test_missing_id_raises(self):
        """A record without an id is rejected."""
        record = get_page_record("page")
        del record["id"]

        with pytest.raises(PageFormatError) as exc_info:
            Page.from_dict(record)

        assert exc_info.value.record_field == "id"

    def test_non_string_title_raises(self):
        """A numeric title is rejected with the field name in the message."""
        with pytest.raises(PageFormatError) as exc_info:
            Page.from_dict(get_page_record("malformed"))

        assert "title" in str(exc_info.value)

    def test_non_list_tags_raises(self):
        """Tags given as a string are rejected."""
        record = get_page_record("page")
        record["tags"] = "python"

        with pytest.raises(PageFormatError) as exc_info:
            Page.from_dict(record)

        assert exc_info.value.record_field == "tags"

    def test_non_iso_created_raises(self):
        """Dates must be ISO 8601 so versions can be ordered."""
        record = get_page_record("legacy")
        record["created"] = "Mon Jan 15 2024"

        with pytest.raises(PageFormatError) as exc_info:
            Page.from_dict(record)

        assert exc_info.value.record_field == "created"

    def test_missing_updated_falls_back_to_created(self):
        record = get_page_record("legacy")
        del record["updated"]

        assert Page.from_dict(record).updated == "2024-01-10T08:00:00.000Z"

    def test_non_iso_history_timestamp_raises(self):
        record = get_page_record("page")
        record["history"][0]["updated"] = "yesterday"

        with pytest.raises(PageFormatError) as exc_info:
            Page.from_dict(record)

        assert exc_info.value.record_field == "history.updated"

    def test_non_object_record_raises(self):
        """A list is not a page record."""
        with pytest.raises(PageFormatError):
            Page.from_dict(["not", "a", "page"])

    def test_page_format_error_is_wiki_error(self):
        """PageFormatError belongs to the application hierarchy."""
        assert issubclass(PageFormatError, WikiError)


class TestTimestamps:
    """Test cases for timestamp helpers."""

    def test_format_timestamp_uses_millis_and_z(self):
        """Timestamps are formatted like JavaScript's toISOString."""
        moment = datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)

        assert format_timestamp(moment) == "2024-01-15T10:30:00.123Z"

    def test_format_timestamp_treats_naive_as_utc(self):
        """Naive datetimes are assumed to be UTC."""
        assert format_timestamp(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00.000Z"

    def test_parse_timestamp_accepts_z_suffix(self):
        """parse_timestamp reads the stored form back."""
        moment = parse_timestamp("2024-01-15T10:30:00.000Z")

        assert moment == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_parse_timestamp_rejects_garbage(self):
        """Unparseable strings raise ValueError."""
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_display_timestamp_falls_back_to_raw_value(self):
        """display_timestamp never raises on bad input."""
        assert display_timestamp("yesterday") == "yesterday"
        assert display_timestamp("2024-01-15T10:30:00.000Z") == "2024-01-15 10:30:00 UTC"
