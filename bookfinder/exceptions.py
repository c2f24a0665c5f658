# bookfinder/exceptions.py
"""
Error types raised by the OpenLibrary data source and the related-books finder.
"""

from typing import Optional


class BookFinderError(Exception):
    """Base class for all bookfinder errors"""


class DataSourceError(BookFinderError):
    """A single data source call failed (transport, status code, or payload)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WorkNotFoundError(DataSourceError):
    """The requested work or author does not exist"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class WorkUnavailableError(BookFinderError):
    """
    The canonical work lookup failed, so no related books can be produced.

    `not_found` separates a missing work from any other failure for
    user messaging only.
    """

    def __init__(self, identifier: str, not_found: bool = False):
        reason = "not found" if not_found else "could not be fetched"
        super().__init__(f"Original work {identifier} {reason}")
        self.identifier = identifier
        self.not_found = not_found
