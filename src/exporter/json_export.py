"""JSON bundle export.

Two shapes are produced:
    {"exportedAt": ..., "version": "1.0", "pages": [...]}  (all pages)
    {"exportedAt": ..., "version": "1.0", "page": {...}}   (single page)
"""

import json
from datetime import datetime
from typing import Iterable, List, Optional

from src.models import Page, PageFormatError, format_timestamp, utc_now

from .errors import ExportError

EXPORT_FORMAT_VERSION = "1.0"


def export_pages_json(pages: Iterable[Page], exported_at: Optional[datetime] = None) -> str:
    """Serialize all pages as a pretty-printed JSON bundle."""
    data = {
        'exportedAt': format_timestamp(exported_at or utc_now()),
        'version': EXPORT_FORMAT_VERSION,
        'pages': [page.to_dict() for page in pages],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_page_json(page: Page, exported_at: Optional[datetime] = None) -> str:
    """Serialize a single page as a pretty-printed JSON bundle."""
    data = {
        'exportedAt': format_timestamp(exported_at or utc_now()),
        'version': EXPORT_FORMAT_VERSION,
        'page': page.to_dict(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def parse_json_export(text: str) -> List[Page]:
    """Read the pages back out of either bundle shape.

    Raises:
        ExportError: If the text is not a recognizable export bundle
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExportError(f"Export is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ExportError(f"Export must be a JSON object, got {type(data).__name__}")

    try:
        if 'pages' in data and isinstance(data['pages'], list):
            return [Page.from_dict(record) for record in data['pages']]
        if 'page' in data:
            return [Page.from_dict(data['page'])]
    except PageFormatError as e:
        raise ExportError(f"Export contains an invalid page: {e}") from e

    raise ExportError("Export has neither a 'pages' list nor a 'page' object")
