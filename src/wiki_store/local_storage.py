"""JSON file key-value storage.

Stands in for the browser's local storage: a single JSON object on disk
mapping well-known keys to serialized values.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key-value store persisted as one JSON object file.

    A missing file reads as an empty store. A file that exists but does not
    hold a JSON object raises StorageError rather than being discarded, so
    a corrupted store is never silently overwritten.

    Example:
        >>> storage = LocalStorage(".slopopedia/storage.json")
        >>> storage.set_item("slopopedia-pages", [])
        >>> storage.get_item("slopopedia-pages")
        []
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if absent.

        Raises:
            StorageError: If the file cannot be read or is not a JSON object
        """
        return self._read().get(key)

    def set_item(self, key: str, value: Any) -> None:
        """Store value under key and write the file.

        Raises:
            StorageError: If the existing file is unreadable or the write fails
        """
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        """Delete key if present and write the file."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return {}
        except PermissionError:
            raise StorageError(str(self.path), 'read', 'Permission denied')
        except OSError as e:
            raise StorageError(str(self.path), 'read', str(e))

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(str(self.path), 'parse', f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            raise StorageError(
                str(self.path),
                'parse',
                f"Storage must be a JSON object, got {type(data).__name__}"
            )
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(str(directory), 'create_directory', str(e))

        # Sibling temp file + rename: the store is either old or new, never partial
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(directory), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except PermissionError:
            raise StorageError(str(self.path), 'write', 'Permission denied')
        except OSError as e:
            raise StorageError(str(self.path), 'write', str(e))

        logger.debug(f"Wrote storage file {self.path}")
