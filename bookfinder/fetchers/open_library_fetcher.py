# bookfinder/fetchers/open_library_fetcher.py
"""
Open Library API raw data fetchers for works, authors and search.
"""

from typing import Dict, Optional

from ..api_caller import APICaller
from ..exceptions import DataSourceError

SEARCH_FIELDS = ",".join([
    "title",
    "author_name",
    "first_publish_year",
    "key",
    "cover_i",
    "edition_count",
    "has_fulltext",
    "public_scan_b",
    "ratings_average",
    "ratings_count",
    "want_to_read_count",
    "already_read_count",
    "subject",
    "author_key",
    "id_amazon",
])

SORT_BY_RATING = "rating desc"
SORT_BY_POPULARITY = "want_to_read_count desc"


def build_search_params(limit: int, sort: Optional[str] = None, **criteria) -> Dict:
    """
    Build query parameters for /search.json.

    Criteria with a None value are left out.
    """
    params = {k: v for k, v in criteria.items() if v is not None}
    params["limit"] = limit
    params["fields"] = SEARCH_FIELDS
    if sort:
        params["sort"] = sort
    return params


def subject_search_params(subject: str, limit: int) -> Dict:
    return build_search_params(limit, SORT_BY_RATING, subject=subject)


def author_search_params(author_key: str, limit: int) -> Dict:
    # The search API matches author keys without the /authors/ prefix
    author_id = author_key.rsplit("/", 1)[-1]
    return build_search_params(limit, SORT_BY_RATING, author_key=author_id)


def trending_search_params(subject: Optional[str], limit: int) -> Dict:
    """Most wanted-to-read books in a subject, or in fiction without one"""
    if subject:
        return build_search_params(limit, SORT_BY_POPULARITY, subject=subject)
    return build_search_params(limit, SORT_BY_POPULARITY, q="fiction")


def query_search_params(query: str, limit: int) -> Dict:
    return build_search_params(limit, q=query)


def fetch_record_data(path: str, api_caller: APICaller, base_url: str) -> Dict:
    """
    Fetch a JSON record such as /works/OL27448W or /authors/OL26320A.

    Raises:
        WorkNotFoundError: the record does not exist (HTTP 404)
        DataSourceError: any other failure
    """
    return api_caller.get_json(f"{base_url}{path}.json")


def fetch_search_data(params: Dict, api_caller: APICaller, base_url: str) -> Dict:
    """
    Run a search query and return the raw response.

    Raises:
        DataSourceError: transport failure or a response without a docs list
    """
    try:
        data = api_caller.get_json(f"{base_url}/search.json", params)
    except DataSourceError as e:
        raise DataSourceError(f"Search failed for {_describe(params)}", e.status_code) from e

    return check_search_data(data, params)


def check_search_data(data, params: Dict) -> Dict:
    """Return the search response if it carries a docs list"""
    if not isinstance(data, dict) or not isinstance(data.get("docs"), list):
        raise DataSourceError(f"Malformed search response for {_describe(params)}")
    return data


def _describe(params: Dict) -> str:
    for name in ("subject", "author_key", "q"):
        if name in params:
            return f"{name}={params[name]!r}"
    return "query"
