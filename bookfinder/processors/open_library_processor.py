# bookfinder/processors/open_library_processor.py
"""
Open Library API response processor.
"""

from typing import List, Dict, Optional, Any

from ..exceptions import DataSourceError
from ..models import WorkRecord, AuthorRecord, BookSummary


def process_work_response(work_data: Dict, requested_key: str) -> WorkRecord:
    """
    Convert a /works/<id>.json response into a WorkRecord.

    Args:
        work_data: Raw JSON response from the Work API
        requested_key: Canonical key that was requested, used when the
            response carries no key of its own

    Returns:
        WorkRecord

    Raises:
        DataSourceError: the payload is not a work record
    """
    if not isinstance(work_data, dict) or not isinstance(work_data.get("title"), str):
        raise DataSourceError(f"Malformed work record for {requested_key}")

    return WorkRecord(
        key=work_data.get("key") or requested_key,
        title=work_data["title"],
        subjects=tuple(_extract_subjects(work_data.get("subjects"))),
        author_keys=tuple(_extract_author_keys(work_data.get("authors"))),
        description=_unwrap_text(work_data.get("description")),
        covers=tuple(c for c in work_data.get("covers") or [] if isinstance(c, int) and c > 0),
        links=tuple(_extract_links(work_data.get("links"))),
        created=_unwrap_text(work_data.get("created")),
        last_modified=_unwrap_text(work_data.get("last_modified")),
        revision=work_data.get("revision"),
        latest_revision=work_data.get("latest_revision"),
    )


def process_author_response(author_data: Dict, requested_key: str) -> AuthorRecord:
    """Convert an /authors/<id>.json response into an AuthorRecord"""
    if not isinstance(author_data, dict) or not author_data.get("name"):
        raise DataSourceError(f"Malformed author record for {requested_key}")

    return AuthorRecord(
        key=author_data.get("key") or requested_key,
        name=author_data["name"],
        birth_date=author_data.get("birth_date"),
        death_date=author_data.get("death_date"),
        bio=_unwrap_text(author_data.get("bio")),
    )


def process_search_response(search_data: Dict) -> List[BookSummary]:
    """
    Convert /search.json docs into BookSummary objects, keeping response order.

    Docs without a key or title are skipped.
    """
    books = []

    for doc in search_data.get("docs", []):
        if not isinstance(doc, dict):
            continue
        key = doc.get("key")
        title = doc.get("title")
        if not key or not title:
            continue

        books.append(BookSummary(
            key=key,
            title=title,
            author_names=list(doc.get("author_name") or []),
            first_publish_year=doc.get("first_publish_year"),
            ratings_average=doc.get("ratings_average"),
            ratings_count=doc.get("ratings_count"),
            want_to_read_count=doc.get("want_to_read_count"),
            already_read_count=doc.get("already_read_count"),
            edition_count=doc.get("edition_count"),
            cover_id=doc.get("cover_i"),
            has_fulltext=bool(doc.get("has_fulltext")),
            public_scan=bool(doc.get("public_scan_b")),
            amazon_ids=list(doc.get("id_amazon") or []),
            subjects=list(doc.get("subject") or []),
            author_keys=list(doc.get("author_key") or []),
        ))

    return books


def _extract_subjects(subjects: Any) -> List[str]:
    """Subjects in their original order, blanks dropped"""
    result = []
    for subject in subjects or []:
        if isinstance(subject, str) and subject.strip():
            result.append(subject.strip())
    return result


def _extract_author_keys(authors: Any) -> List[str]:
    """Author keys from [{"author": {"key": ...}}], entries without a key skipped"""
    keys = []
    for ref in authors or []:
        if not isinstance(ref, dict):
            continue
        author = ref.get("author")
        if isinstance(author, dict) and author.get("key"):
            keys.append(author["key"])
    return keys


def _extract_links(links: Any) -> List[tuple]:
    result = []
    for link in links or []:
        if isinstance(link, dict) and link.get("url"):
            result.append((link.get("title") or link["url"], link["url"]))
    return result


def _unwrap_text(value: Any) -> Optional[str]:
    # Text and datetime fields are either plain strings or {"type": ..., "value": ...}
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, str) and value.strip():
        return value
    return None
