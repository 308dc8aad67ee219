"""Diff engine for comparing two versions of a page.

This module provides the DiffEngine class which compares two Version
snapshots and produces a structured VersionDiff: a change summary, an
optional title change, and an optional list of line-level markers for the
content.
"""

import html
import logging
from typing import List

from src.models import Version

from .models import DiffLine, DiffLineKind, DiffSection, DiffSectionKind, VersionDiff

logger = logging.getLogger(__name__)

NO_DIFFERENCES_MESSAGE = "No significant differences detected between these versions."


class DiffEngine:
    """Compares two page versions line by line.

    Lines are paired by position after blank lines are dropped, so this is
    not a minimal edit script: inserting a line near the top shows every
    later line as a removed/added pair. Blank-line-only edits produce no
    markers at all.

    Example:
        >>> engine = DiffEngine()
        >>> result = engine.generate_diff(old_version, new_version)
        >>> result.has_changes
        True
    """

    def generate_diff(self, old_version: Version, new_version: Version) -> VersionDiff:
        """Build the display sections comparing two versions.

        The versions are not required to be ordered; by convention the new
        version is the one with the higher number.

        Args:
            old_version: Snapshot treated as "before"
            new_version: Snapshot treated as "after"

        Returns:
            VersionDiff whose first section is always the change summary
        """
        sections: List[DiffSection] = [
            DiffSection(
                kind=DiffSectionKind.SUMMARY,
                version=new_version.version,
                updated=new_version.updated,
                changes=new_version.changes,
            )
        ]

        if old_version.title != new_version.title:
            sections.append(
                DiffSection(
                    kind=DiffSectionKind.TITLE_CHANGE,
                    old_title=old_version.title,
                    new_title=new_version.title,
                )
            )

        lines = self.diff_lines(old_version.content, new_version.content)
        if lines:
            sections.append(DiffSection(kind=DiffSectionKind.CONTENT_CHANGE, lines=lines))

        if len(sections) == 1:
            sections.append(
                DiffSection(kind=DiffSectionKind.NO_CHANGES, message=NO_DIFFERENCES_MESSAGE)
            )

        logger.debug(
            f"Diff v{old_version.version} -> v{new_version.version}: "
            f"{len(lines)} line marker(s)"
        )

        return VersionDiff(
            old_version=old_version.version,
            new_version=new_version.version,
            old_updated=old_version.updated,
            new_updated=new_version.updated,
            sections=sections,
        )

    def diff_lines(self, old_text: str, new_text: str) -> List[DiffLine]:
        """Positional line comparison of two content strings.

        Args:
            old_text: Content before the change
            new_text: Content after the change

        Returns:
            Removed/added markers in document order, text HTML-escaped
        """
        old_lines = self._content_lines(old_text)
        new_lines = self._content_lines(new_text)

        markers: List[DiffLine] = []
        for i in range(max(len(old_lines), len(new_lines))):
            old_line = old_lines[i] if i < len(old_lines) else ""
            new_line = new_lines[i] if i < len(new_lines) else ""

            if old_line == new_line:
                continue

            if old_line:
                markers.append(DiffLine(DiffLineKind.REMOVED, self._escape(old_line)))
            if new_line:
                markers.append(DiffLine(DiffLineKind.ADDED, self._escape(new_line)))

        return markers

    def _content_lines(self, text: str) -> List[str]:
        """Split on newlines and drop blank or whitespace-only lines."""
        if not text:
            return []
        return [line for line in text.split("\n") if line.strip()]

    def _escape(self, text: str) -> str:
        return html.escape(text, quote=False)
