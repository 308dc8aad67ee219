"""Version snapshot data model."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.models.errors import PageFormatError
from src.models.timestamps import parse_timestamp


def check_timestamp(value: Any, record_field: str) -> str:
    """Return value if it is an ISO 8601 timestamp string.

    Raises:
        PageFormatError: If value is not a string or not ISO 8601
    """
    if not isinstance(value, str):
        raise PageFormatError(
            f"must be a string, got {type(value).__name__}",
            record_field
        )
    try:
        parse_timestamp(value)
    except ValueError:
        raise PageFormatError(f"must be an ISO 8601 timestamp, got {value!r}", record_field)
    return value


@dataclass(frozen=True)
class Version:
    """One immutable snapshot of a page.

    Attributes:
        version: 1-based sequence number within the page history
        title: Page title as of this version
        content: Page content (HTML) as of this version
        excerpt: Optional excerpt as of this version
        updated: ISO 8601 timestamp of when the snapshot was taken
        changes: Free-text description of what changed
    """
    version: int
    title: str
    content: str
    excerpt: Optional[str]
    updated: str
    changes: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted record shape."""
        return {
            'version': self.version,
            'title': self.title,
            'content': self.content,
            'excerpt': self.excerpt,
            'updated': self.updated,
            'changes': self.changes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Version':
        """Build a Version from a persisted record.

        Raises:
            PageFormatError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise PageFormatError(
                f"version entry must be an object, got {type(data).__name__}",
                'history'
            )

        number = data.get('version')
        # bool is an int subclass; reject it explicitly
        if not isinstance(number, int) or isinstance(number, bool):
            raise PageFormatError(
                f"must be an integer, got {type(number).__name__}",
                'history.version'
            )

        for name in ('title', 'content'):
            if not isinstance(data.get(name), str):
                raise PageFormatError(
                    f"must be a string, got {type(data.get(name)).__name__}",
                    f'history.{name}'
                )
        updated = check_timestamp(data.get('updated'), 'history.updated')

        excerpt = data.get('excerpt')
        if excerpt is not None and not isinstance(excerpt, str):
            raise PageFormatError(
                f"must be a string or null, got {type(excerpt).__name__}",
                'history.excerpt'
            )

        changes = data.get('changes')
        if not isinstance(changes, str):
            changes = ''

        return cls(
            version=number,
            title=data['title'],
            content=data['content'],
            excerpt=excerpt,
            updated=updated,
            changes=changes,
        )
