"""Wiki store: the repository object that owns the page collection.

The WikiStore is created explicitly by its caller and persists pages
through a LocalStorage key-value file.
"""

from .errors import StoreError, StorageError
from .local_storage import LocalStorage
from .store import PAGES_KEY, MergeSummary, WikiStore
from .text import highlight_search_term, page_excerpt, strip_html

__all__ = [
    'WikiStore',
    'MergeSummary',
    'LocalStorage',
    'PAGES_KEY',
    'StoreError',
    'StorageError',
    'highlight_search_term',
    'page_excerpt',
    'strip_html',
]
