"""Tests for console formatting."""

from bookfinder.formatters import (
    RELATED_LEGEND,
    format_date,
    format_description,
    format_related_book,
    format_related_books,
    format_search_results,
    format_work_details,
)
from bookfinder.models import AuthorRecord, RelatedBooksResult, WorkRecord

from conftest import make_book


class TestFormatRelatedBook:
    def test_all_markers(self):
        book = make_book(
            "OL1W", rating=4.25, want_to_read=120, title="The Hobbit",
            author_names=["J.R.R. Tolkien"], first_publish_year=1937,
            has_fulltext=True, public_scan=True, amazon_ids=["B007978NPG"],
        )

        text = format_related_book(book, 0)

        assert text.splitlines() == [
            "1. The Hobbit (1937) ⭐ 4.2",
            "   📝 Author(s): J.R.R. Tolkien",
            "   🆔 OpenLibrary ID: /works/OL1W 👥 120 want to read 📖 🌐 🛒",
            "   🛒 Amazon: https://amazon.com/dp/B007978NPG",
        ]

    def test_minimal(self):
        text = format_related_book(make_book("OL2W", title="Anon"), 4)

        assert text.splitlines() == [
            "5. Anon",
            "   📝 Author(s): Unknown Author",
            "   🆔 OpenLibrary ID: /works/OL2W",
        ]


class TestFormatRelatedBooks:
    def test_empty_result(self):
        result = RelatedBooksResult(original=WorkRecord(key="/works/OL1W", title="Alone"))

        text = format_related_books(result)

        assert "📖 Original Book: Alone" in text
        assert "📭 No related books found" in text
        assert "Legend:" not in text

    def test_with_books(self):
        result = RelatedBooksResult(
            original=WorkRecord(key="/works/OL1W", title="Dune"),
            books=[make_book("OL2W", title="Hyperion"), make_book("OL3W", title="Foundation")],
        )

        text = format_related_books(result)

        assert "1. Hyperion" in text
        assert "2. Foundation" in text
        assert text.endswith(RELATED_LEGEND)


class TestFormatWorkDetails:
    def test_full_details(self, tolkien):
        work = WorkRecord(
            key="/works/OL27448W",
            title="The Lord of the Rings",
            subjects=tuple(f"Subject {i}" for i in range(12)),
            description="First paragraph.\n\nSecond paragraph.",
            covers=(1, 2, 3, 4),
            links=(("Wikipedia", "https://en.wikipedia.org/wiki/LOTR"),),
            created="2009-10-15T04:40:46.813286",
            revision=42,
            latest_revision=43,
        )

        text = format_work_details(work, [tolkien])

        assert "📖 Title: The Lord of the Rings" in text
        assert "   • J.R.R. Tolkien (3 January 1892 - 2 September 1973)" in text
        assert "   First paragraph.\n\n   Second paragraph." in text
        assert "   • Subject 9" in text
        assert "Subject 10" not in text
        assert "   ... and 2 more" in text
        assert "   • Wikipedia: https://en.wikipedia.org/wiki/LOTR" in text
        assert "   3. https://covers.openlibrary.org/b/id/3-L.jpg" in text
        assert "4-L.jpg" not in text
        assert "   Created: October 15, 2009" in text
        assert "   Last Modified: Unknown" in text
        assert "   Revision: 42 (latest: 43)" in text

    def test_missing_synopsis_and_long_bio(self):
        author = AuthorRecord(key="/authors/OL1A", name="Verbose", bio="x" * 250)
        work = WorkRecord(key="/works/OL1W", title="Quiet")

        text = format_work_details(work, [author])

        assert "📄 Synopsis: Not available" in text
        assert "     📝 " + "x" * 200 + "..." in text
        assert "   • Verbose\n" in text


class TestHelpers:
    def test_format_description(self):
        assert format_description("a\n\nb") == "   a\n\n   b"

    def test_format_date(self):
        assert format_date(None) == "Unknown"
        assert format_date("2023-05-01T12:00:00") == "May 1, 2023"
        assert format_date("not a date") == "not a date"

    def test_format_search_results(self):
        books = [make_book("OL1W", title="Dune", edition_count=3, cover_id=10)]

        text = format_search_results("dune", books)

        assert "📚 Found 1 books for: dune" in text
        assert "🆔 OpenLibrary ID: /works/OL1W 📚 3 editions" in text
        assert "https://covers.openlibrary.org/b/id/10-L.jpg" in text
        assert format_search_results("zzz", []) == "📭 No books found for: zzz"
