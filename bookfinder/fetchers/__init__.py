# bookfinder/fetchers/__init__.py
"""
Data fetcher modules for the OpenLibrary API.
"""

from .open_library_fetcher import (
    SEARCH_FIELDS,
    SORT_BY_RATING,
    SORT_BY_POPULARITY,
    build_search_params,
    subject_search_params,
    author_search_params,
    trending_search_params,
    query_search_params,
    fetch_record_data,
    fetch_search_data,
    check_search_data,
)

__all__ = [
    "SEARCH_FIELDS",
    "SORT_BY_RATING",
    "SORT_BY_POPULARITY",
    "build_search_params",
    "subject_search_params",
    "author_search_params",
    "trending_search_params",
    "query_search_params",
    "fetch_record_data",
    "fetch_search_data",
    "check_search_data",
]
