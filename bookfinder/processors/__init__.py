# bookfinder/processors/__init__.py
"""
Data processor modules for OpenLibrary responses.
"""

from .open_library_processor import (
    process_work_response,
    process_author_response,
    process_search_response,
)

__all__ = ["process_work_response", "process_author_response", "process_search_response"]
