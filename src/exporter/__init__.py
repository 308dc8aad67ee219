"""Page export to JSON bundles and Markdown documents.

Exports are output only; parse_json_export exists to read a bundle back
for verification, there is no import path into the store.
"""

from .errors import ExportError
from .json_export import (
    EXPORT_FORMAT_VERSION,
    export_page_json,
    export_pages_json,
    parse_json_export,
)
from .markdown_export import export_pages_markdown, html_to_markdown, page_to_markdown
from .files import export_filename, slugify, write_export

__all__ = [
    'EXPORT_FORMAT_VERSION',
    'export_page_json',
    'export_pages_json',
    'parse_json_export',
    'export_pages_markdown',
    'html_to_markdown',
    'page_to_markdown',
    'export_filename',
    'slugify',
    'write_export',
    'ExportError',
]
