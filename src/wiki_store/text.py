"""Text helpers for displaying page content."""

import re

from bs4 import BeautifulSoup

from src.models import Page

EXCERPT_LENGTH = 150


def strip_html(content: str) -> str:
    """Return the text of an HTML fragment with all markup removed."""
    if not content:
        return ""
    return BeautifulSoup(content, "lxml").get_text()


def page_excerpt(page: Page) -> str:
    """Excerpt shown in page listings.

    Uses the page excerpt when set, otherwise the first 150 characters of
    the page text followed by an ellipsis.
    """
    if page.excerpt:
        return page.excerpt
    return strip_html(page.content)[:EXCERPT_LENGTH] + "..."


def highlight_search_term(text: str, query: str, open_tag: str = "<mark>",
                          close_tag: str = "</mark>") -> str:
    """Wrap every case-insensitive occurrence of query in text.

    The query is matched literally, not as a regular expression.
    """
    if not query:
        return text
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)
