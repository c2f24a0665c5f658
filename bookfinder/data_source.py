# bookfinder/data_source.py
"""
Book data source capability and its OpenLibrary implementation.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .api_caller import APICaller
from .config import Settings
from .fetchers import (
    subject_search_params,
    author_search_params,
    trending_search_params,
    query_search_params,
    fetch_record_data,
    fetch_search_data,
)
from .models import WorkRecord, AuthorRecord, BookSummary
from .processors import process_work_response, process_author_response, process_search_response

WORKS_PREFIX = "/works/"
AUTHORS_PREFIX = "/authors/"


def normalize_work_key(identifier: str) -> str:
    """
    Return the canonical /works/<id> form of a work identifier.

    >>> normalize_work_key("OL27448W")
    '/works/OL27448W'
    >>> normalize_work_key("/works/OL27448W")
    '/works/OL27448W'
    """
    identifier = (identifier or "").strip()
    if not identifier:
        raise ValueError("Work identifier must not be empty")
    if identifier.startswith(WORKS_PREFIX):
        return identifier
    return f"{WORKS_PREFIX}{identifier}"


def normalize_author_key(identifier: str) -> str:
    identifier = (identifier or "").strip()
    if not identifier:
        raise ValueError("Author identifier must not be empty")
    if identifier.startswith(AUTHORS_PREFIX):
        return identifier
    return f"{AUTHORS_PREFIX}{identifier}"


class BookDataSource(ABC):
    """
    Read-only source of works, authors and book search results.

    Every method raises DataSourceError on failure; lookups raise
    WorkNotFoundError when the record does not exist.
    """

    @abstractmethod
    def fetch_work(self, identifier: str) -> WorkRecord:
        """Fetch the canonical work record"""
        pass

    @abstractmethod
    def search_by_subject(self, subject: str, limit: int) -> List[BookSummary]:
        """Books tagged with a subject, best rated first"""
        pass

    @abstractmethod
    def search_by_author(self, author_key: str, limit: int) -> List[BookSummary]:
        """Books by an author, best rated first"""
        pass

    @abstractmethod
    def search_trending(self, subject: Optional[str], limit: int) -> List[BookSummary]:
        """Most wanted-to-read books, optionally within a subject"""
        pass

    @abstractmethod
    def fetch_author(self, author_key: str) -> AuthorRecord:
        """Fetch an author record"""
        pass

    @abstractmethod
    def search_books(self, query: str, limit: int) -> List[BookSummary]:
        """Free text search"""
        pass


class OpenLibraryDataSource(BookDataSource):
    """BookDataSource backed by the public OpenLibrary REST API"""

    def __init__(self, settings: Optional[Settings] = None, api_caller: Optional[APICaller] = None):
        self.settings = settings or Settings()
        self.api_caller = api_caller or APICaller(
            rate_limit=self.settings.rate_limit,
            max_retries=self.settings.max_retries,
            timeout=self.settings.timeout,
        )
        self.base_url = self.settings.base_url
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch_work(self, identifier: str) -> WorkRecord:
        work_key = normalize_work_key(identifier)
        self.logger.info(f"Fetching work {work_key}")
        data = fetch_record_data(work_key, self.api_caller, self.base_url)
        return process_work_response(data, work_key)

    def fetch_author(self, author_key: str) -> AuthorRecord:
        author_key = normalize_author_key(author_key)
        self.logger.info(f"Fetching author {author_key}")
        data = fetch_record_data(author_key, self.api_caller, self.base_url)
        return process_author_response(data, author_key)

    def search_by_subject(self, subject: str, limit: int) -> List[BookSummary]:
        return self._search(subject_search_params(subject, limit))

    def search_by_author(self, author_key: str, limit: int) -> List[BookSummary]:
        return self._search(author_search_params(author_key, limit))

    def search_trending(self, subject: Optional[str], limit: int) -> List[BookSummary]:
        return self._search(trending_search_params(subject, limit))

    def search_books(self, query: str, limit: int) -> List[BookSummary]:
        return self._search(query_search_params(query, limit))

    def close(self) -> None:
        self.api_caller.close()

    def _search(self, params) -> List[BookSummary]:
        data = fetch_search_data(params, self.api_caller, self.base_url)
        books = process_search_response(data)
        self.logger.debug(f"Search {params} returned {len(books)} books")
        return books
