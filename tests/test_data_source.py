"""Tests for the OpenLibrary data source and fetchers."""

import pytest
from unittest.mock import MagicMock

import requests

from bookfinder.api_caller import APICaller
from bookfinder.config import Settings
from bookfinder.data_source import OpenLibraryDataSource, normalize_work_key, normalize_author_key
from bookfinder.exceptions import DataSourceError, WorkNotFoundError
from bookfinder.fetchers import (
    SEARCH_FIELDS,
    build_search_params,
    author_search_params,
    trending_search_params,
    query_search_params,
)

from conftest import make_response


@pytest.fixture
def api_caller():
    caller = APICaller(rate_limit=1000.0, timeout=10.0)
    caller.session = MagicMock()
    return caller


@pytest.fixture
def source(api_caller):
    return OpenLibraryDataSource(Settings(base_url="https://ol.test"), api_caller=api_caller)


def sent_params(api_caller):
    return api_caller.session.get.call_args[1]["params"]


class TestNormalizeKeys:
    """Tests for identifier normalization."""

    def test_bare_work_id(self):
        assert normalize_work_key("OL27448W") == "/works/OL27448W"

    def test_prefixed_work_id(self):
        assert normalize_work_key("/works/OL27448W") == "/works/OL27448W"

    def test_author_id(self):
        assert normalize_author_key("OL26320A") == "/authors/OL26320A"
        assert normalize_author_key("/authors/OL26320A") == "/authors/OL26320A"

    def test_empty(self):
        with pytest.raises(ValueError):
            normalize_work_key("")


class TestSearchParams:
    """Tests for the shared search parameter builders."""

    def test_none_criteria_dropped(self):
        params = build_search_params(5, "rating desc", subject="Fantasy", author_key=None)

        assert params == {"subject": "Fantasy", "limit": 5, "fields": SEARCH_FIELDS, "sort": "rating desc"}

    def test_no_sort(self):
        assert "sort" not in build_search_params(10, q="dune")
        assert query_search_params("dune", 10)["q"] == "dune"

    def test_author_prefix_stripped(self):
        params = author_search_params("/authors/OL26320A", 3)

        assert params["author_key"] == "OL26320A"
        assert params["sort"] == "rating desc"

    def test_trending_without_subject(self):
        params = trending_search_params(None, 5)

        assert params["q"] == "fiction"
        assert params["sort"] == "want_to_read_count desc"
        assert "subject" not in params


class TestOpenLibraryDataSource:
    """Tests for OpenLibraryDataSource over an APICaller with a mocked session."""

    def test_fetch_work(self, source, api_caller):
        api_caller.session.get.return_value = make_response(
            200, {"key": "/works/OL1W", "title": "Dune", "subjects": ["Sci-fi"]}
        )

        work = source.fetch_work("OL1W")

        api_caller.session.get.assert_called_once_with("https://ol.test/works/OL1W.json", params=None, timeout=10.0)
        assert work.title == "Dune"
        assert work.subjects == ("Sci-fi",)

    def test_fetch_work_not_found(self, source, api_caller):
        api_caller.session.get.return_value = make_response(404)

        with pytest.raises(WorkNotFoundError):
            source.fetch_work("OL404W")

    def test_fetch_work_transport_error(self, source, api_caller):
        api_caller.session.get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(DataSourceError) as excinfo:
            source.fetch_work("OL1W")

        assert not isinstance(excinfo.value, WorkNotFoundError)
        assert excinfo.value.status_code is None

    def test_fetch_work_malformed(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, ["not", "a", "record"])

        with pytest.raises(DataSourceError) as excinfo:
            source.fetch_work("OL1W")

        assert "Malformed" in str(excinfo.value)

    def test_fetch_author(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, {"key": "/authors/OL1A", "name": "Frank Herbert"})

        author = source.fetch_author("/authors/OL1A")

        assert api_caller.session.get.call_args[0][0] == "https://ol.test/authors/OL1A.json"
        assert author.name == "Frank Herbert"

    def test_search_by_subject(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, {"docs": [{"key": "/works/OL2W", "title": "Emma"}]})

        books = source.search_by_subject("Fantasy", 5)

        assert api_caller.session.get.call_args[0][0] == "https://ol.test/search.json"
        params = sent_params(api_caller)
        assert params["subject"] == "Fantasy"
        assert params["limit"] == 5
        assert params["sort"] == "rating desc"
        assert [b.key for b in books] == ["/works/OL2W"]

    def test_search_by_author_strips_prefix(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, {"docs": []})

        assert source.search_by_author("/authors/OL26320A", 3) == []

        params = sent_params(api_caller)
        assert params["author_key"] == "OL26320A"
        assert params["limit"] == 3

    def test_search_trending(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, {"docs": []})

        source.search_trending("Fantasy", 5)
        params = sent_params(api_caller)
        assert params["sort"] == "want_to_read_count desc"
        assert params["subject"] == "Fantasy"

        source.search_trending(None, 5)
        assert sent_params(api_caller)["q"] == "fiction"

    def test_search_failure(self, source, api_caller):
        api_caller.session.get.return_value = make_response(503)

        with pytest.raises(DataSourceError) as excinfo:
            source.search_by_subject("Fantasy", 5)

        assert excinfo.value.status_code == 503
        assert str(excinfo.value) == "Search failed for subject='Fantasy'"

    def test_author_search_failure_names_author(self, source, api_caller):
        """Author search errors name the author key, not a generic query."""
        api_caller.session.get.return_value = make_response(500)

        with pytest.raises(DataSourceError) as excinfo:
            source.search_by_author("/authors/OL1A", 3)

        assert str(excinfo.value) == "Search failed for author_key='OL1A'"

    def test_search_not_found_is_not_a_missing_work(self, source, api_caller):
        api_caller.session.get.return_value = make_response(404)

        with pytest.raises(DataSourceError) as excinfo:
            source.search_books("dune", 10)

        assert not isinstance(excinfo.value, WorkNotFoundError)

    def test_search_without_docs(self, source, api_caller):
        api_caller.session.get.return_value = make_response(200, {"error": "bad query"})

        with pytest.raises(DataSourceError):
            source.search_books("dune", 10)
