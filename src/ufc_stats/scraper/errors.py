"""Exceptions raised by the UFCStats scraper."""

from typing import Optional


class ScraperError(Exception):
    """Base class for scraper failures."""


class FetchError(ScraperError):
    """A page request failed at the transport level or returned a non-2xx status."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch {url}: {message}")
        self.url = url
        self.status_code = status_code


class StructuralError(ScraperError):
    """The fetched document does not look like the expected page type."""
