# bookfinder/api_caller.py
"""
Rate limited HTTP GET wrapper for the OpenLibrary API.
"""

import requests
import time
import logging
from typing import Dict, Optional, Tuple

from .exceptions import DataSourceError, WorkNotFoundError

USER_AGENT = "bookfinder (+https://openlibrary.org/developers/api)"


class RateLimiter:
    """Spaces calls at least 1 / calls_per_second seconds apart"""

    def __init__(self, calls_per_second: float = 1.0):
        self.min_interval = 1.0 / calls_per_second
        self.last_called = 0.0

    def wait(self):
        remaining = self.min_interval - (time.time() - self.last_called)
        if remaining > 0:
            time.sleep(remaining)
        self.last_called = time.time()


class APICaller:
    """
    Shared requests session with throttling and retries.

    `max_retries` counts total attempts; the default of 1 issues each request
    exactly once. Only server errors (5xx) and transport failures are retried.
    """

    def __init__(self, rate_limit: float = 5.0, max_retries: int = 1, timeout: float = 10.0):
        self.rate_limiter = RateLimiter(rate_limit)
        self.max_retries = max_retries
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        self.logger = logging.getLogger(self.__class__.__name__)

    def get(self, url: str, params: Optional[Dict] = None) -> Tuple[bool, int, Optional[Dict]]:
        """
        Make HTTP GET request.

        Returns:
            (success, status_code, data). status_code is 0 when no response
            arrived at all.
        """
        status_code = 0
        for attempt in range(self.max_retries):
            if attempt:
                self._backoff_sleep(attempt - 1)
            self.rate_limiter.wait()

            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                self.logger.warning(f"{type(e).__name__} for {url} (attempt {attempt + 1}/{self.max_retries})")
                status_code = 0
                continue

            status_code = response.status_code
            if status_code >= 500:
                self.logger.warning(f"HTTP {status_code} for {url} (attempt {attempt + 1}/{self.max_retries})")
                continue
            if status_code != 200:
                self.logger.warning(f"HTTP {status_code} for {url}")
                return False, status_code, None

            try:
                return True, status_code, response.json()
            except ValueError:
                self.logger.warning(f"Invalid JSON response from {url}")
                return False, status_code, None

        return False, status_code, None

    def get_json(self, url: str, params: Optional[Dict] = None) -> Dict:
        """
        GET a JSON object.

        Raises:
            WorkNotFoundError: HTTP 404
            DataSourceError: any other failure, or a body that is not an object
        """
        success, status_code, data = self.get(url, params)

        if status_code == 404:
            raise WorkNotFoundError(f"Not found: {url}")
        if not success:
            raise DataSourceError(f"Could not fetch {url}", status_code or None)
        if not isinstance(data, dict):
            raise DataSourceError(f"Malformed response from {url}", status_code)
        return data

    def close(self) -> None:
        self.session.close()

    def _backoff_sleep(self, attempt: int) -> None:
        sleep_time = 2 ** attempt
        self.logger.info(f"Backing off for {sleep_time}s")
        time.sleep(sleep_time)
