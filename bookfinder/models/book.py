# bookfinder/models/book.py
"""
Data models for OpenLibrary works, authors and search results.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Iterator


@dataclass(frozen=True)
class WorkRecord:
    """Canonical work record from /works/<id>.json"""
    key: str
    title: str
    subjects: Tuple[str, ...] = ()
    author_keys: Tuple[str, ...] = ()

    # Details view only
    description: Optional[str] = None
    covers: Tuple[int, ...] = ()
    links: Tuple[Tuple[str, str], ...] = ()
    created: Optional[str] = None
    last_modified: Optional[str] = None
    revision: Optional[int] = None
    latest_revision: Optional[int] = None


@dataclass(frozen=True)
class AuthorRecord:
    """Author record from /authors/<id>.json"""
    key: str
    name: str
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    bio: Optional[str] = None


@dataclass
class BookSummary:
    """One document from the search API"""
    key: str
    title: str
    author_names: List[str] = field(default_factory=list)
    first_publish_year: Optional[int] = None
    ratings_average: Optional[float] = None
    ratings_count: Optional[int] = None
    want_to_read_count: Optional[int] = None
    already_read_count: Optional[int] = None
    edition_count: Optional[int] = None
    cover_id: Optional[int] = None
    has_fulltext: bool = False
    public_scan: bool = False
    amazon_ids: List[str] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    author_keys: List[str] = field(default_factory=list)

    @property
    def rating_key(self) -> float:
        """Average rating, missing counted as 0"""
        return self.ratings_average or 0

    @property
    def popularity_key(self) -> int:
        """Want-to-read count, missing counted as 0"""
        return self.want_to_read_count or 0

    @property
    def amazon_url(self) -> Optional[str]:
        if self.amazon_ids:
            return f"https://amazon.com/dp/{self.amazon_ids[0]}"
        return None

    @property
    def cover_url(self) -> Optional[str]:
        if self.cover_id:
            return f"https://covers.openlibrary.org/b/id/{self.cover_id}-L.jpg"
        return None


@dataclass
class RelatedBooksResult:
    """
    Outcome of one related-books run.

    `books` is ranked and truncated; `candidate_count` is the size of the
    deduplicated accumulator before truncation. `errors` holds one entry
    per strategy call that failed.
    """
    original: WorkRecord
    books: List[BookSummary] = field(default_factory=list)
    candidate_count: int = 0
    fallback_used: bool = False
    processing_log: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add_log(self, message: str) -> None:
        """Add a message to the processing log"""
        self.processing_log.append(message)

    def add_error(self, label: str, error: Exception) -> None:
        """Record a failed strategy call in both the error list and the log"""
        message = f"{label}: {error}"
        self.errors.append(message)
        self.add_log(f"{label}: Error - {error}")

    def __iter__(self) -> Iterator[BookSummary]:
        return iter(self.books)

    def __len__(self) -> int:
        return len(self.books)

    def get_summary(self) -> dict:
        """Get a summary dict for reporting"""
        return {
            "original_key": self.original.key,
            "original_title": self.original.title,
            "candidate_count": self.candidate_count,
            "returned_count": len(self.books),
            "fallback_used": self.fallback_used,
            "keys": [book.key for book in self.books],
            "errors": self.errors,
            "processing_log": self.processing_log,
        }
