# bookfinder/async_related_books.py
"""
Async related books finder with concurrent strategy queries.
"""

import asyncio
import aiohttp
import logging
from typing import Dict, List, Optional, Set

from .config import Settings
from .data_source import normalize_work_key, normalize_author_key
from .exceptions import DataSourceError, WorkNotFoundError, WorkUnavailableError
from .fetchers import (
    subject_search_params,
    author_search_params,
    trending_search_params,
    query_search_params,
    check_search_data,
)
from .models import WorkRecord, AuthorRecord, BookSummary, RelatedBooksResult
from .processors import process_work_response, process_author_response, process_search_response
from .related_books import (
    MAX_SUBJECTS,
    SUBJECT_LIMIT,
    AUTHOR_LIMIT,
    TRENDING_LIMIT,
    add_candidates,
    needs_fallback,
    rank_books,
)


class AsyncOpenLibraryDataSource:
    """
    aiohttp based OpenLibrary data source.

    Mirrors OpenLibraryDataSource with coroutine methods. Use as an async
    context manager so the session is opened and closed:

        async with AsyncOpenLibraryDataSource(settings) as source:
            work = await source.fetch_work("OL27448W")
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.base_url = self.settings.base_url
        self.rate_limit_delay = 1.0 / self.settings.rate_limit
        self.max_retries = self.settings.max_retries
        self.semaphore = asyncio.Semaphore(self.settings.max_concurrent)
        self.session = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def __aenter__(self):
        """Async context manager entry"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
            connector=aiohttp.TCPConnector(limit=self.settings.max_concurrent),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.session:
            await self.session.close()

    async def fetch_work(self, identifier: str) -> WorkRecord:
        work_key = normalize_work_key(identifier)
        data = await self._get_json(f"{self.base_url}{work_key}.json")
        return process_work_response(data, work_key)

    async def fetch_author(self, author_key: str) -> AuthorRecord:
        author_key = normalize_author_key(author_key)
        data = await self._get_json(f"{self.base_url}{author_key}.json")
        return process_author_response(data, author_key)

    async def search_by_subject(self, subject: str, limit: int) -> List[BookSummary]:
        return await self._search(subject_search_params(subject, limit))

    async def search_by_author(self, author_key: str, limit: int) -> List[BookSummary]:
        return await self._search(author_search_params(author_key, limit))

    async def search_trending(self, subject: Optional[str], limit: int) -> List[BookSummary]:
        return await self._search(trending_search_params(subject, limit))

    async def search_books(self, query: str, limit: int) -> List[BookSummary]:
        return await self._search(query_search_params(query, limit))

    async def _search(self, params: Dict) -> List[BookSummary]:
        data = await self._get_json(f"{self.base_url}/search.json", params)
        return process_search_response(check_search_data(data, params))

    async def _get_json(self, url: str, params: Optional[Dict] = None):
        """
        GET a JSON body with throttling and retries.

        Each attempt waits `rate_limit_delay` inside the semaphore. Server
        errors (5xx) and transport failures are retried up to `max_retries`
        total attempts; any other status fails at once.
        """
        if self.session is None:
            raise RuntimeError("AsyncOpenLibraryDataSource must be used as an async context manager")

        async with self.semaphore:
            for attempt in range(self.max_retries):
                last_attempt = attempt == self.max_retries - 1
                await asyncio.sleep(self.rate_limit_delay)

                try:
                    async with self.session.get(url, params=params) as response:
                        if response.status == 200:
                            try:
                                return await response.json(content_type=None)
                            except ValueError:
                                raise DataSourceError(f"Invalid JSON response from {url}", response.status)
                        if response.status == 404:
                            raise WorkNotFoundError(f"Not found: {url}")
                        self.logger.warning(f"HTTP {response.status} for {url}, attempt {attempt + 1}")
                        if response.status < 500 or last_attempt:
                            raise DataSourceError(f"HTTP {response.status} for {url}", response.status)
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    self.logger.warning(f"Request failed for {url}, attempt {attempt + 1}: {e!r}")
                    if last_attempt:
                        raise DataSourceError(f"Request failed for {url}: {e!r}") from e

                await self._backoff_sleep(attempt)

        raise DataSourceError(f"No request attempts made for {url}")

    async def _backoff_sleep(self, attempt: int) -> None:
        sleep_time = 2 ** attempt
        self.logger.info(f"Backing off for {sleep_time}s")
        await asyncio.sleep(sleep_time)


class AsyncRelatedBooksFinder:
    """
    Related books finder that issues the subject and author queries
    concurrently.

    Responses are merged in the same order the sequential finder uses
    (subjects, then authors, each in response order), so results are
    identical for identical data.
    """

    def __init__(self, data_source):
        self.data_source = data_source
        self.logger = logging.getLogger(self.__class__.__name__)

    async def find_related(self, identifier: str) -> RelatedBooksResult:
        work_key = normalize_work_key(identifier)
        work = await self._fetch_original(work_key)
        self.logger.info(f"Finding books related to: {work.title} ({work.key})")

        result = RelatedBooksResult(original=work)
        result.add_log(f"Original work: {work.title}")

        related: Dict[str, BookSummary] = {}
        exclude_keys = {work_key, work.key}

        labels = []
        tasks = []
        for subject in work.subjects[:MAX_SUBJECTS]:
            labels.append(f"Subject {subject!r}")
            tasks.append(self.data_source.search_by_subject(subject, SUBJECT_LIMIT))
        for author_key in work.author_keys:
            labels.append(f"Author {author_key}")
            tasks.append(self.data_source.search_by_author(author_key, AUTHOR_LIMIT))

        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for label, response in zip(labels, responses):
            self._merge_response(label, response, related, result, exclude_keys)

        if needs_fallback(related, work):
            subject = work.subjects[0]
            result.fallback_used = True
            try:
                response = await self.data_source.search_trending(subject, TRENDING_LIMIT)
            except DataSourceError as e:
                response = e
            self._merge_response(f"Trending in {subject!r}", response, related, result, exclude_keys)

        result.candidate_count = len(related)
        result.books = rank_books(related.values())

        self.logger.info(
            f"Related books complete: candidates={result.candidate_count}, "
            f"returned={len(result.books)}, fallback={result.fallback_used}"
        )
        return result

    async def _fetch_original(self, work_key: str) -> WorkRecord:
        try:
            return await self.data_source.fetch_work(work_key)
        except WorkNotFoundError as e:
            self.logger.error(f"Work not found: {work_key}")
            raise WorkUnavailableError(work_key, not_found=True) from e
        except DataSourceError as e:
            self.logger.error(f"Could not fetch work details for {work_key}: {e}")
            raise WorkUnavailableError(work_key) from e

    def _merge_response(self, label: str, response, related: Dict[str, BookSummary],
                        result: RelatedBooksResult, exclude_keys: Set[str]) -> None:
        if isinstance(response, DataSourceError):
            self.logger.warning(f"Could not fetch books for {label}: {response}")
            result.add_error(label, response)
            return
        if isinstance(response, BaseException):
            raise response

        added = add_candidates(related, response, exclude_keys)
        result.add_log(f"{label}: {added} books")


async def async_find_related(identifier: str, settings: Optional[Settings] = None) -> RelatedBooksResult:
    """Open a session, find related books for one work, and close it"""
    async with AsyncOpenLibraryDataSource(settings) as source:
        finder = AsyncRelatedBooksFinder(source)
        return await finder.find_related(identifier)
