"""Export filenames and writing export files."""

import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional, Union

from .errors import ExportError

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "slopopedia"


def slugify(text: str) -> str:
    """Lowercase text and collapse every run of non-alphanumerics into one dash."""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower())
    return slug.strip('-')


def export_filename(extension: str, title: Optional[str] = None,
                    today: Optional[date] = None) -> str:
    """Build the download name for an export.

    Examples:
        slopopedia-all-pages-2024-01-15.json
        slopopedia-my-page-2024-01-15.md
    """
    stamp = (today or date.today()).isoformat()
    name = slugify(title) if title is not None else "all-pages"
    return f"{FILENAME_PREFIX}-{name}-{stamp}.{extension}"


def write_export(directory: Union[str, Path], filename: str, content: str) -> Path:
    """Write export content into directory, creating it if needed.

    Raises:
        ExportError: If the file cannot be written
    """
    target = Path(directory) / filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding='utf-8')
    except OSError as e:
        raise ExportError(f"Failed to write export: {e}", str(target))
    logger.info(f"Wrote export {target}")
    return target
