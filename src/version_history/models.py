"""Data models for the version store and diff engine.

The diff result is structured rather than markup so that any renderer
(terminal, HTML, JSON) can consume it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class PageUpdate:
    """Proposed field updates for one edit.

    A field left as None is not part of the edit and keeps the page's
    current value.

    Attributes:
        title: New title
        content: New content (HTML)
        excerpt: New excerpt
        tags: Replacement tag list
        links: Replacement outbound link list
    """
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None
    links: Optional[List[str]] = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.title, self.content, self.excerpt, self.tags, self.links)
        )


@dataclass
class HistoryEntry:
    """One row of the history listing shown for a page.

    Attributes:
        version: Version number
        updated: Timestamp of the version
        changes: Change description
        is_current: True for the page's current version
        can_view: Whether "view this version" is offered (always True)
        can_compare: Whether "compare with previous" is offered (not for version 1)
    """
    version: int
    updated: str
    changes: str
    is_current: bool = False
    can_view: bool = True
    can_compare: bool = False


class DiffLineKind(Enum):
    """Marker for a single line in a content diff."""

    ADDED = "added"
    REMOVED = "removed"


class DiffSectionKind(Enum):
    """Display sections of a version diff, in the order they appear."""

    SUMMARY = "summary"
    TITLE_CHANGE = "title_change"
    CONTENT_CHANGE = "content_change"
    NO_CHANGES = "no_changes"


@dataclass(frozen=True)
class DiffLine:
    """A removed or added content line.

    Attributes:
        kind: Whether the line was removed or added
        text: Line text, HTML-escaped
    """
    kind: DiffLineKind
    text: str

    @property
    def prefix(self) -> str:
        return "+" if self.kind is DiffLineKind.ADDED else "-"


@dataclass
class DiffSection:
    """One display section of a version diff.

    Only the attributes relevant to the section kind are populated.

    Attributes:
        kind: Section kind
        version: New version number (summary)
        updated: New version timestamp (summary)
        changes: New version change description (summary)
        old_title: Title before the change (title change)
        new_title: Title after the change (title change)
        lines: Ordered line markers (content change)
        message: Notice text (no changes)
    """
    kind: DiffSectionKind
    version: Optional[int] = None
    updated: Optional[str] = None
    changes: Optional[str] = None
    old_title: Optional[str] = None
    new_title: Optional[str] = None
    lines: List[DiffLine] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'kind': self.kind.value}
        if self.kind is DiffSectionKind.SUMMARY:
            data.update(version=self.version, updated=self.updated, changes=self.changes)
        elif self.kind is DiffSectionKind.TITLE_CHANGE:
            data.update(old_title=self.old_title, new_title=self.new_title)
        elif self.kind is DiffSectionKind.CONTENT_CHANGE:
            data['lines'] = [
                {'kind': line.kind.value, 'text': line.text} for line in self.lines
            ]
        else:
            data['message'] = self.message
        return data


@dataclass
class VersionDiff:
    """Structured comparison between two versions of a page.

    Attributes:
        old_version: Number of the older snapshot
        new_version: Number of the newer snapshot
        old_updated: Timestamp of the older snapshot
        new_updated: Timestamp of the newer snapshot
        sections: Display sections, summary first
    """
    old_version: int
    new_version: int
    old_updated: str
    new_updated: str
    sections: List[DiffSection] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """False when the diff only carries the no-differences notice."""
        return not any(s.kind is DiffSectionKind.NO_CHANGES for s in self.sections)

    def section(self, kind: DiffSectionKind) -> Optional[DiffSection]:
        """Return the first section of the given kind, if present."""
        for candidate in self.sections:
            if candidate.kind is kind:
                return candidate
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'oldVersion': self.old_version,
            'newVersion': self.new_version,
            'oldUpdated': self.old_updated,
            'newUpdated': self.new_updated,
            'sections': [s.to_dict() for s in self.sections],
        }
