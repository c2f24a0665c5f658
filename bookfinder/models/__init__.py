# bookfinder/models/__init__.py
"""
Data models for the bookfinder tools.
"""

from .book import WorkRecord, AuthorRecord, BookSummary, RelatedBooksResult

__all__ = [
    "WorkRecord",
    "AuthorRecord",
    "BookSummary",
    "RelatedBooksResult"
]
