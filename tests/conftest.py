"""
Pytest configuration and shared fakes for bookfinder tests.
"""
import pytest
from unittest.mock import MagicMock

from bookfinder.data_source import BookDataSource, normalize_work_key
from bookfinder.exceptions import WorkNotFoundError
from bookfinder.models import BookSummary, WorkRecord, AuthorRecord


def make_response(status_code, payload=None, json_error=False):
    """Stand-in for a requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = payload
    return response


def make_book(key, rating=None, want_to_read=None, title=None, **kwargs):
    """Build a BookSummary with a /works/ key"""
    if not key.startswith("/works/"):
        key = f"/works/{key}"
    return BookSummary(
        key=key,
        title=title or f"Book {key.rsplit('/', 1)[-1]}",
        ratings_average=rating,
        want_to_read_count=want_to_read,
        **kwargs,
    )


def make_books(prefix, count, rating=None):
    return [make_book(f"{prefix}{i}W", rating=rating) for i in range(count)]


class FakeDataSource(BookDataSource):
    """
    In-memory BookDataSource that records every call.

    Values in the lookup dicts may be exceptions, which are raised.
    """

    def __init__(self, works=None, subjects=None, authors=None, trending=None, author_records=None):
        self.works = works or {}
        self.subjects = subjects or {}
        self.authors = authors or {}
        self.trending = trending or {}
        self.author_records = author_records or {}
        self.calls = []

    def _lookup(self, table, key, limit):
        value = table.get(key, [])
        if isinstance(value, Exception):
            raise value
        return list(value)[:limit]

    def fetch_work(self, identifier):
        identifier = normalize_work_key(identifier)
        self.calls.append(("fetch_work", identifier))
        work = self.works.get(identifier)
        if work is None:
            raise WorkNotFoundError(f"Not found: {identifier}")
        if isinstance(work, Exception):
            raise work
        return work

    def search_by_subject(self, subject, limit):
        self.calls.append(("subject", subject, limit))
        return self._lookup(self.subjects, subject, limit)

    def search_by_author(self, author_key, limit):
        self.calls.append(("author", author_key, limit))
        return self._lookup(self.authors, author_key, limit)

    def search_trending(self, subject, limit):
        self.calls.append(("trending", subject, limit))
        return self._lookup(self.trending, subject, limit)

    def fetch_author(self, author_key):
        self.calls.append(("fetch_author", author_key))
        author = self.author_records.get(author_key)
        if author is None:
            raise WorkNotFoundError(f"Not found: {author_key}")
        return author

    def search_books(self, query, limit):
        self.calls.append(("search", query, limit))
        return self._lookup(self.subjects, query, limit)

    def call_kinds(self):
        return [call[0] for call in self.calls]


class AsyncFakeDataSource:
    """Coroutine wrapper over FakeDataSource"""

    def __init__(self, fake):
        self.fake = fake

    async def fetch_work(self, identifier):
        return self.fake.fetch_work(identifier)

    async def search_by_subject(self, subject, limit):
        return self.fake.search_by_subject(subject, limit)

    async def search_by_author(self, author_key, limit):
        return self.fake.search_by_author(author_key, limit)

    async def search_trending(self, subject, limit):
        return self.fake.search_trending(subject, limit)


@pytest.fixture
def lotr_work():
    """Work with three subjects and one author"""
    return WorkRecord(
        key="/works/OL27448W",
        title="The Lord of the Rings",
        subjects=("Fantasy", "Adventure", "Epic", "Middle Earth"),
        author_keys=("/authors/OL26320A",),
    )


@pytest.fixture
def tolkien():
    return AuthorRecord(
        key="/authors/OL26320A",
        name="J.R.R. Tolkien",
        birth_date="3 January 1892",
        death_date="2 September 1973",
        bio="English writer and philologist.",
    )
