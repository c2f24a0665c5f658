# bookfinder/formatters.py
"""
Console text formatting for search results, work details and related books.
"""

from datetime import datetime
from typing import List, Optional

from .models import WorkRecord, AuthorRecord, BookSummary, RelatedBooksResult

MAX_SUBJECTS_SHOWN = 10
MAX_COVERS_SHOWN = 3
MAX_BIO_LENGTH = 200

RELATED_LEGEND = "\n".join([
    "Legend:",
    "⭐ = Average rating",
    "👥 = Number of users who want to read",
    "📖 = Has full text available",
    "🌐 = Has public scan available",
    "🛒 = Available on Amazon",
])


def format_authors(book: BookSummary) -> str:
    return ", ".join(book.author_names) if book.author_names else "Unknown Author"


def format_related_book(book: BookSummary, index: int) -> str:
    """Format one related book entry, numbered from 1"""
    year = f" ({book.first_publish_year})" if book.first_publish_year else ""
    rating = f" ⭐ {book.ratings_average:.1f}" if book.ratings_average else ""
    popularity = f" 👥 {book.want_to_read_count} want to read" if book.want_to_read_count else ""
    fulltext = " 📖" if book.has_fulltext else ""
    public_scan = " 🌐" if book.public_scan else ""
    amazon = " 🛒" if book.amazon_ids else ""

    lines = [
        f"{index + 1}. {book.title}{year}{rating}",
        f"   📝 Author(s): {format_authors(book)}",
        f"   🆔 OpenLibrary ID: {book.key}{popularity}{fulltext}{public_scan}{amazon}",
    ]
    if book.amazon_url:
        lines.append(f"   🛒 Amazon: {book.amazon_url}")
    return "\n".join(lines)


def format_related_books(result: RelatedBooksResult) -> str:
    """Format the full related books report"""
    lines = [f"📖 Original Book: {result.original.title}", ""]

    if not result.books:
        lines.append("📭 No related books found. Try searching for books in specific subjects or by author.")
        return "\n".join(lines)

    lines.append("📚 Related Books:")
    lines.append("=" * 18)
    for index, book in enumerate(result.books):
        lines.append(format_related_book(book, index))
        lines.append("")
    lines.append(RELATED_LEGEND)
    return "\n".join(lines)


def format_search_result(book: BookSummary, index: int) -> str:
    """Format one search hit, numbered from 1"""
    year = f" ({book.first_publish_year})" if book.first_publish_year else ""
    editions = f" 📚 {book.edition_count} editions" if book.edition_count else ""
    lines = [
        f"{index + 1}. {book.title}{year}",
        f"   📝 Author(s): {format_authors(book)}",
        f"   🆔 OpenLibrary ID: {book.key}{editions}",
    ]
    if book.cover_url:
        lines.append(f"   🖼️  Cover: {book.cover_url}")
    return "\n".join(lines)


def format_search_results(query: str, books: List[BookSummary]) -> str:
    if not books:
        return f"📭 No books found for: {query}"
    lines = [f"📚 Found {len(books)} books for: {query}", ""]
    for index, book in enumerate(books):
        lines.append(format_search_result(book, index))
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def format_description(description: str) -> str:
    """Indent the first line and every paragraph by three spaces"""
    return "   " + description.replace("\n\n", "\n\n   ")


def format_date(value: Optional[str]) -> str:
    """Render an OpenLibrary timestamp as 'Month D, YYYY'"""
    if not value:
        return "Unknown"
    try:
        date = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{date:%B} {date.day}, {date.year}"


def format_author(author: AuthorRecord) -> str:
    """Author name with life dates, key, and a shortened bio"""
    dates = ""
    if author.birth_date:
        death = f" - {author.death_date}" if author.death_date else ""
        dates = f" ({author.birth_date}{death})"

    lines = [f"   • {author.name}{dates}", f"     🆔 {author.key}"]
    if author.bio:
        bio = author.bio
        if len(bio) > MAX_BIO_LENGTH:
            bio = bio[:MAX_BIO_LENGTH] + "..."
        lines.append(f"     📝 {bio}")
    return "\n".join(lines)


def format_work_details(work: WorkRecord, authors: List[AuthorRecord]) -> str:
    """Format the book details view for a work and its fetched authors"""
    lines = [
        "📚 Book Details",
        "===============",
        f"📖 Title: {work.title}",
        f"🆔 OpenLibrary ID: {work.key}",
    ]

    if authors:
        lines.append("")
        lines.append("👤 Authors:")
        for author in authors:
            lines.append(format_author(author))

    lines.append("")
    if work.description:
        lines.append("📄 Synopsis:")
        lines.append(format_description(work.description))
    else:
        lines.append("📄 Synopsis: Not available")

    if work.subjects:
        lines.append("")
        lines.append("🏷️  Subjects:")
        for subject in work.subjects[:MAX_SUBJECTS_SHOWN]:
            lines.append(f"   • {subject}")
        if len(work.subjects) > MAX_SUBJECTS_SHOWN:
            lines.append(f"   ... and {len(work.subjects) - MAX_SUBJECTS_SHOWN} more")

    if work.links:
        lines.append("")
        lines.append("🔗 External Links:")
        for title, url in work.links:
            lines.append(f"   • {title}: {url}")

    if work.covers:
        lines.append("")
        lines.append("🖼️  Cover Images:")
        for index, cover_id in enumerate(work.covers[:MAX_COVERS_SHOWN]):
            lines.append(f"   {index + 1}. https://covers.openlibrary.org/b/id/{cover_id}-L.jpg")

    revision = str(work.revision) if work.revision is not None else "Unknown"
    if work.latest_revision:
        revision += f" (latest: {work.latest_revision})"

    lines.append("")
    lines.append("📊 Metadata:")
    lines.append(f"   Created: {format_date(work.created)}")
    lines.append(f"   Last Modified: {format_date(work.last_modified)}")
    lines.append(f"   Revision: {revision}")

    return "\n".join(lines)
