# bookfinder/__init__.py
"""
OpenLibrary book tools: search, work details and related book suggestions.

Primary interfaces:
- RelatedBooksFinder: Ranked related books for a single work
- OpenLibraryDataSource: Work, author and search lookups over the public API
- AsyncRelatedBooksFinder: Same ranking with concurrent strategy queries
"""

from .models import WorkRecord, AuthorRecord, BookSummary, RelatedBooksResult
from .config import Settings
from .exceptions import BookFinderError, DataSourceError, WorkNotFoundError, WorkUnavailableError
from .data_source import BookDataSource, OpenLibraryDataSource, normalize_work_key
from .related_books import RelatedBooksFinder, add_candidates, rank_books
from .async_related_books import AsyncOpenLibraryDataSource, AsyncRelatedBooksFinder, async_find_related

# Lower level components
from .api_caller import APICaller

__all__ = [
    # Primary interface
    "RelatedBooksFinder",
    "OpenLibraryDataSource",
    "BookDataSource",
    "normalize_work_key",
    "add_candidates",
    "rank_books",
    "AsyncRelatedBooksFinder",
    "AsyncOpenLibraryDataSource",
    "async_find_related",

    # Models
    "WorkRecord",
    "AuthorRecord",
    "BookSummary",
    "RelatedBooksResult",

    # Settings and errors
    "Settings",
    "BookFinderError",
    "DataSourceError",
    "WorkNotFoundError",
    "WorkUnavailableError",

    # Internal components
    "APICaller",
]
