"""Wiki page data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.models.errors import PageFormatError
from src.models.version import Version, check_timestamp


@dataclass
class Page:
    """A wiki page with its current state and full edit history.

    The page record is the mutable projection of the latest Version; the
    history list is append-only and owned by the version store.

    Attributes:
        id: Unique page identifier (opaque string)
        title: Current title
        content: Current content (HTML)
        excerpt: Optional short summary
        created: ISO 8601 creation timestamp
        updated: ISO 8601 timestamp of the last change
        tags: Optional list of tag labels (None when never tagged)
        links: Outbound link target page IDs, in insertion order
        current_version: Number of the latest version (None for legacy pages)
        history: Ordered version snapshots, oldest first
    """
    id: str
    title: str
    content: str
    created: str
    updated: str
    excerpt: Optional[str] = None
    tags: Optional[List[str]] = None
    links: List[str] = field(default_factory=list)
    current_version: Optional[int] = None
    history: List[Version] = field(default_factory=list)

    @property
    def has_history(self) -> bool:
        """True when more than the initial version exists."""
        return len(self.history) > 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted/exported record shape.

        The ``tags`` key is omitted when the page has never been tagged.
        """
        data: Dict[str, Any] = {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'excerpt': self.excerpt,
            'created': self.created,
            'updated': self.updated,
        }
        if self.tags is not None:
            data['tags'] = list(self.tags)
        data['links'] = list(self.links)
        data['currentVersion'] = self.current_version
        data['history'] = [version.to_dict() for version in self.history]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Page':
        """Build a Page from a persisted or fetched record.

        Records without ``history``/``currentVersion`` are accepted as legacy
        pages; the version store repairs them on their first edit.

        Raises:
            PageFormatError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise PageFormatError(
                f"page must be an object, got {type(data).__name__}"
            )

        page_id = data.get('id')
        if not isinstance(page_id, str) or not page_id.strip():
            raise PageFormatError("must be a non-empty string", 'id')

        for name in ('title', 'content'):
            if not isinstance(data.get(name), str):
                raise PageFormatError(
                    f"must be a string, got {type(data.get(name)).__name__}",
                    name
                )

        created = check_timestamp(data.get('created'), 'created')
        updated = check_timestamp(data.get('updated', created), 'updated')

        excerpt = data.get('excerpt')
        if excerpt is not None and not isinstance(excerpt, str):
            raise PageFormatError(
                f"must be a string or null, got {type(excerpt).__name__}",
                'excerpt'
            )

        tags = data.get('tags')
        if tags is not None:
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise PageFormatError("must be a list of strings", 'tags')
            tags = list(tags)

        links = data.get('links') or []
        if not isinstance(links, list) or not all(isinstance(l, str) for l in links):
            raise PageFormatError("must be a list of strings", 'links')

        current_version = data.get('currentVersion')
        if current_version is not None and (
            not isinstance(current_version, int) or isinstance(current_version, bool)
        ):
            raise PageFormatError(
                f"must be an integer or null, got {type(current_version).__name__}",
                'currentVersion'
            )

        history = data.get('history') or []
        if not isinstance(history, list):
            raise PageFormatError(
                f"must be a list, got {type(history).__name__}",
                'history'
            )

        return cls(
            id=page_id,
            title=data['title'],
            content=data['content'],
            created=created,
            updated=updated,
            excerpt=excerpt,
            tags=tags,
            links=list(links),
            current_version=current_version,
            history=[Version.from_dict(entry) for entry in history],
        )
