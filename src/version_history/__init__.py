"""Version store and diff engine for wiki pages.

Key pieces:
    append_version: Appends one snapshot and syncs the page's current fields
    get_version: Looks up a snapshot by number
    history_entries: Newest-first history listing for display
    validate_history: Checks the append-only log invariants
    DiffEngine: Line-positional comparison of two versions
"""

from .errors import VersionHistoryError, HistoryIntegrityError
from .models import (
    DiffLine,
    DiffLineKind,
    DiffSection,
    DiffSectionKind,
    HistoryEntry,
    PageUpdate,
    VersionDiff,
)
from .history import (
    DEFAULT_CHANGE_DESCRIPTION,
    INITIAL_VERSION_DESCRIPTION,
    append_version,
    get_version,
    history_entries,
    initial_version,
    validate_history,
)
from .diff import DiffEngine, NO_DIFFERENCES_MESSAGE

__all__ = [
    # Version store
    "append_version",
    "get_version",
    "history_entries",
    "initial_version",
    "validate_history",
    "DEFAULT_CHANGE_DESCRIPTION",
    "INITIAL_VERSION_DESCRIPTION",
    # Diff engine
    "DiffEngine",
    "NO_DIFFERENCES_MESSAGE",
    # Data models
    "DiffLine",
    "DiffLineKind",
    "DiffSection",
    "DiffSectionKind",
    "HistoryEntry",
    "PageUpdate",
    "VersionDiff",
    # Errors
    "VersionHistoryError",
    "HistoryIntegrityError",
]
