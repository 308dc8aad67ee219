"""Markdown export using markdownify.

Only headings, paragraphs, bold, italic, lists and line breaks are turned
into Markdown syntax. Every other tag is dropped with its text kept, and
text is not Markdown-escaped.
"""

from datetime import datetime
from typing import Iterable, Optional

from markdownify import MarkdownConverter as BaseMarkdownConverter

from src.models import Page, display_timestamp, format_timestamp, utc_now

from .errors import ExportError

CONVERTED_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'strong', 'em', 'ul', 'li', 'br']

EXPORT_SEPARATOR = "\n\n---\n\n"


class _ExportMarkdownConverter(BaseMarkdownConverter):
    """markdownify converter restricted to the exported tag set."""

    def __init__(self, **options):
        options.setdefault('convert', CONVERTED_TAGS)
        options.setdefault('heading_style', 'atx')  # Use # style headings
        options.setdefault('bullets', '-')  # Use - for bullets
        options.setdefault('strong_em_symbol', '*')  # Use * for bold/italic
        options.setdefault('escape_asterisks', False)
        options.setdefault('escape_underscores', False)
        options.setdefault('escape_misc', False)
        super().__init__(**options)


def html_to_markdown(content: str) -> str:
    """Convert page HTML to Markdown.

    Raises:
        ExportError: If markdownify fails on the content
    """
    if not content:
        return ""
    try:
        return _ExportMarkdownConverter().convert(content).strip()
    except Exception as e:
        raise ExportError(f"Markdown conversion failed: {e}") from e


def page_to_markdown(page: Page) -> str:
    """Render one page as a Markdown document with a metadata footer."""
    markdown = f"# {page.title}\n\n"

    if page.excerpt:
        markdown += f"*{page.excerpt}*\n\n"

    markdown += html_to_markdown(page.content)

    markdown += EXPORT_SEPARATOR
    markdown += "**Metadata:**\n"
    markdown += f"- Created: {display_timestamp(page.created)}\n"
    markdown += f"- Updated: {display_timestamp(page.updated)}\n"
    markdown += f"- Version: {page.current_version or 1}\n"

    if page.links:
        markdown += f"- Links: {len(page.links)} connected pages\n"

    return markdown


def export_pages_markdown(pages: Iterable[Page], exported_at: Optional[datetime] = None) -> str:
    """Render all pages into a single Markdown document."""
    moment = exported_at or utc_now()
    markdown = (
        "# Slopopedia Export\n\n"
        f"Exported on: {display_timestamp(format_timestamp(moment))}"
        f"{EXPORT_SEPARATOR}"
    )
    for page in pages:
        markdown += page_to_markdown(page)
        markdown += EXPORT_SEPARATOR
    return markdown
