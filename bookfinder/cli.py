#!/usr/bin/env python3
# bookfinder/cli.py
"""
Command line entry point for the OpenLibrary book tools.

    bookfinder search "the left hand of darkness"
    bookfinder details OL27448W
    bookfinder related /works/OL27448W [--async]
"""

import asyncio
import logging
import sys
from typing import List, Optional

from .async_related_books import async_find_related
from .config import Settings, configure_logging
from .data_source import OpenLibraryDataSource
from .exceptions import DataSourceError, WorkNotFoundError, WorkUnavailableError
from .formatters import format_related_books, format_search_results, format_work_details
from .related_books import RelatedBooksFinder

SEARCH_LIMIT = 10

logger = logging.getLogger("bookfinder")

USAGE = """🔍 OpenLibrary Book Tools
========================
Usage:
  bookfinder search "QUERY"            Search for books
  bookfinder details "WORK_ID"         Show work and author details
  bookfinder related "WORK_ID" [--async]
                                       Find related books

Examples:
  bookfinder search "dune"
  bookfinder details "OL893415W"       # Dune
  bookfinder related "/works/OL27448W" # Lord of the Rings

💡 Tip: Get work IDs from the search command

Related books are found using:
  📚 Books with similar subjects/themes
  👤 Other works by the same author(s)
  📈 Popular books in related categories"""


def run_search(source: OpenLibraryDataSource, query: str) -> int:
    print(f"🔍 Searching OpenLibrary for: {query}")
    print("=" * 50)
    try:
        books = source.search_books(query, SEARCH_LIMIT)
    except DataSourceError as e:
        print(f"❌ Search failed: {e}")
        return 1
    print(format_search_results(query, books))
    return 0


def run_details(source: OpenLibraryDataSource, work_id: str) -> int:
    print(f"🔍 Fetching details for: {work_id}")
    try:
        work = source.fetch_work(work_id)
    except WorkNotFoundError:
        print(f"❌ Work not found: {work_id}")
        return 1
    except DataSourceError as e:
        print(f"❌ API Error: {e}")
        return 1

    authors = []
    for author_key in work.author_keys:
        try:
            authors.append(source.fetch_author(author_key))
        except DataSourceError as e:
            logger.warning(f"Could not fetch author details for {author_key}: {e}")
            print(f"⚠️  Could not fetch author details for {author_key}")

    print()
    print(format_work_details(work, authors))
    return 0


def run_related(source: OpenLibraryDataSource, work_id: str, use_async: bool = False) -> int:
    print(f"🔍 Finding books related to: {work_id}")
    print("=" * 50)
    try:
        if use_async:
            result = asyncio.run(async_find_related(work_id, source.settings))
        else:
            result = RelatedBooksFinder(source).find_related(work_id)
    except WorkUnavailableError as e:
        if e.not_found:
            print(f"❌ Work not found: {work_id}")
        else:
            print("❌ Could not fetch original book details")
        return 1

    for error in result.errors:
        print(f"⚠️  {error}")
    print(format_related_books(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Dispatch a command; returns the process exit status"""
    args = list(sys.argv[1:] if argv is None else argv)

    use_async = "--async" in args
    args = [arg for arg in args if arg != "--async"]

    if len(args) < 2 or args[0] not in ("search", "details", "related") or not args[1].strip():
        print(USAGE)
        return 1

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"❌ Configuration error: {e}")
        return 1

    configure_logging(settings.log_level)

    command = args[0]
    # Unquoted search terms arrive as separate arguments
    value = " ".join(args[1:]) if command == "search" else args[1]
    source = OpenLibraryDataSource(settings)
    try:
        if command == "search":
            return run_search(source, value)
        if command == "details":
            return run_details(source, value)
        return run_related(source, value, use_async=use_async)
    finally:
        source.close()


if __name__ == "__main__":
    sys.exit(main())
