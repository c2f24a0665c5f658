# bookfinder/config.py
"""
Runtime settings read from environment variables.
"""

import logging
import os
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}")


@dataclass
class Settings:
    """OpenLibrary client settings"""
    base_url: str = "https://openlibrary.org"
    timeout: float = 10.0
    rate_limit: float = 5.0
    max_retries: int = 1
    max_concurrent: int = 5
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        Recognised variables:
            OPENLIBRARY_BASE_URL, OPENLIBRARY_TIMEOUT, OPENLIBRARY_RATE_LIMIT,
            OPENLIBRARY_MAX_RETRIES, OPENLIBRARY_MAX_CONCURRENT, LOG_LEVEL
        """
        settings = cls(
            base_url=os.environ.get("OPENLIBRARY_BASE_URL", cls.base_url).rstrip("/"),
            timeout=_env_number("OPENLIBRARY_TIMEOUT", cls.timeout, float),
            rate_limit=_env_number("OPENLIBRARY_RATE_LIMIT", cls.rate_limit, float),
            max_retries=_env_number("OPENLIBRARY_MAX_RETRIES", cls.max_retries, int),
            max_concurrent=_env_number("OPENLIBRARY_MAX_CONCURRENT", cls.max_concurrent, int),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
        )

        if settings.rate_limit <= 0:
            raise ValueError("OPENLIBRARY_RATE_LIMIT must be positive")
        if settings.max_retries < 1:
            raise ValueError("OPENLIBRARY_MAX_RETRIES must be at least 1")
        if settings.max_concurrent < 1:
            raise ValueError("OPENLIBRARY_MAX_CONCURRENT must be at least 1")

        return settings


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging the same way for every entry point"""
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)
