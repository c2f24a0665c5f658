# bookfinder/related_books.py
"""
Related books finder - suggests books related to a single work.
Handles a single work identifier -> RelatedBooksResult transformation.
"""

import logging
from typing import Dict, Iterable, List, Set

from .data_source import BookDataSource, normalize_work_key
from .exceptions import DataSourceError, WorkNotFoundError, WorkUnavailableError
from .models import WorkRecord, BookSummary, RelatedBooksResult

MAX_SUBJECTS = 3
SUBJECT_LIMIT = 5
AUTHOR_LIMIT = 3
FALLBACK_THRESHOLD = 8
TRENDING_LIMIT = 5
MAX_RESULTS = 12


def add_candidates(accumulator: Dict[str, BookSummary], books: Iterable[BookSummary],
                   exclude_keys: Set[str]) -> int:
    """
    Insert books into the accumulator keyed by book key.

    A repeated key overwrites the stored summary but keeps its original
    position. Excluded keys (the original work) are never inserted.

    Returns:
        Number of books inserted or overwritten
    """
    added = 0
    for book in books:
        if book.key in exclude_keys:
            continue
        accumulator[book.key] = book
        added += 1
    return added


def rank_books(books: Iterable[BookSummary], limit: int = MAX_RESULTS) -> List[BookSummary]:
    """
    Sort by rating, then want-to-read count (both descending, missing as 0)
    and keep the first `limit` entries. Equal books keep their input order.
    """
    ranked = sorted(books, key=lambda book: (-book.rating_key, -book.popularity_key))
    return ranked[:limit]


def needs_fallback(accumulator: Dict[str, BookSummary], work: WorkRecord) -> bool:
    return len(accumulator) < FALLBACK_THRESHOLD and len(work.subjects) > 0


class RelatedBooksFinder:
    """
    Finds books related to a work using three strategies run in order:

    1. Best rated books in the work's first three subjects
    2. Best rated books by each of the work's authors
    3. Most wanted-to-read books in the first subject, only when the first
       two produced fewer than FALLBACK_THRESHOLD candidates

    Any strategy call that fails contributes nothing; only a failed lookup
    of the original work is fatal.
    """

    def __init__(self, data_source: BookDataSource):
        self.data_source = data_source
        self.logger = logging.getLogger(self.__class__.__name__)

    def find_related(self, identifier: str) -> RelatedBooksResult:
        """
        Main method for a single work.

        Args:
            identifier: Work id, bare ("OL27448W") or prefixed ("/works/OL27448W")

        Returns:
            RelatedBooksResult with at most MAX_RESULTS ranked books

        Raises:
            WorkUnavailableError: the original work could not be fetched
        """
        work_key = normalize_work_key(identifier)
        work = self._fetch_original(work_key)
        self.logger.info(f"Finding books related to: {work.title} ({work.key})")

        result = RelatedBooksResult(original=work)
        result.add_log(f"Original work: {work.title}")

        related: Dict[str, BookSummary] = {}
        exclude_keys = {work_key, work.key}

        # Step 1: Books sharing the top subjects
        self._add_subject_books(work, related, result, exclude_keys)

        # Step 2: Books by the same author(s)
        self._add_author_books(work, related, result, exclude_keys)

        # Step 3: Popular books from the first subject if we don't have enough
        if needs_fallback(related, work):
            self._add_trending_books(work, related, result, exclude_keys)

        result.candidate_count = len(related)
        result.books = rank_books(related.values())

        self.logger.info(
            f"Related books complete: candidates={result.candidate_count}, "
            f"returned={len(result.books)}, fallback={result.fallback_used}"
        )
        return result

    def _fetch_original(self, work_key: str) -> WorkRecord:
        try:
            return self.data_source.fetch_work(work_key)
        except WorkNotFoundError as e:
            self.logger.error(f"Work not found: {work_key}")
            raise WorkUnavailableError(work_key, not_found=True) from e
        except DataSourceError as e:
            self.logger.error(f"Could not fetch work details for {work_key}: {e}")
            raise WorkUnavailableError(work_key) from e

    def _add_subject_books(self, work: WorkRecord, related: Dict[str, BookSummary],
                           result: RelatedBooksResult, exclude_keys: Set[str]) -> None:
        for subject in work.subjects[:MAX_SUBJECTS]:
            try:
                books = self.data_source.search_by_subject(subject, SUBJECT_LIMIT)
            except DataSourceError as e:
                self._strategy_failed(result, f"Subject {subject!r}", e)
                continue
            added = add_candidates(related, books, exclude_keys)
            result.add_log(f"Subject {subject!r}: {added} books")

    def _add_author_books(self, work: WorkRecord, related: Dict[str, BookSummary],
                          result: RelatedBooksResult, exclude_keys: Set[str]) -> None:
        for author_key in work.author_keys:
            try:
                books = self.data_source.search_by_author(author_key, AUTHOR_LIMIT)
            except DataSourceError as e:
                self._strategy_failed(result, f"Author {author_key}", e)
                continue
            added = add_candidates(related, books, exclude_keys)
            result.add_log(f"Author {author_key}: {added} books")

    def _add_trending_books(self, work: WorkRecord, related: Dict[str, BookSummary],
                            result: RelatedBooksResult, exclude_keys: Set[str]) -> None:
        subject = work.subjects[0]
        result.fallback_used = True
        try:
            books = self.data_source.search_trending(subject, TRENDING_LIMIT)
        except DataSourceError as e:
            self._strategy_failed(result, f"Trending in {subject!r}", e)
            return
        added = add_candidates(related, books, exclude_keys)
        result.add_log(f"Trending in {subject!r}: {added} books")

    def _strategy_failed(self, result: RelatedBooksResult, label: str, error: DataSourceError) -> None:
        self.logger.warning(f"Could not fetch books for {label}: {error}")
        result.add_error(label, error)
