"""HTTP client for UFCStats.com scraping."""

import logging
import threading
import time
from typing import Optional

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import FetchError

BASE_URL = "http://ufcstats.com"
EVENTS_URL = f"{BASE_URL}/statistics/events/completed"

# Default headers to mimic browser
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

logger = logging.getLogger(__name__)


def make_soup(markup: str) -> BeautifulSoup:
    """Parse raw markup with the lxml tree builder."""
    return BeautifulSoup(markup, "lxml")


class UFCStatsClient:
    """HTTP client with rate limiting for UFCStats.com.

    Shared by the fight-page workers. Only the rate limiter is guarded by a
    lock; requests go through one ``requests.Session``.
    """

    def __init__(
        self,
        delay_seconds: float = 0.1,
        timeout: float = 30.0,
        retry: Optional[Retry] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client with rate limiting delay and optional retry policy."""
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)
        if retry is not None:
            adapter = HTTPAdapter(max_retries=retry)
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)
        self.delay = delay_seconds
        self.timeout = timeout
        self._last_request_time: Optional[float] = None
        self._lock = threading.Lock()

    def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        with self._lock:
            if self._last_request_time is not None:
                elapsed = time.time() - self._last_request_time
                if elapsed < self.delay:
                    time.sleep(self.delay - elapsed)
            self._last_request_time = time.time()

    def fetch(self, url: str) -> str:
        """Fetch URL and return the raw markup.

        Raises:
            FetchError: on transport failure or a non-2xx status
        """
        self._rate_limit()
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, f"network error: {e}") from e
        if not 200 <= response.status_code < 300:
            raise FetchError(url, f"HTTP {response.status_code}", status_code=response.status_code)
        return response.text

    def get(self, url: str) -> BeautifulSoup:
        """Fetch URL and return parsed BeautifulSoup object."""
        return make_soup(self.fetch(url))

    def get_events_page(self) -> BeautifulSoup:
        """Get the completed events listing with every event on one page."""
        return self.get(completed_events_url())


def completed_events_url() -> str:
    """URL of the all-at-once completed events listing."""
    return f"{EVENTS_URL}?page=all"


def event_url(event_id: str) -> str:
    """URL of a single event details page."""
    return f"{BASE_URL}/event-details/{event_id}"


def fight_url(fight_id: str) -> str:
    """URL of a single fight details page."""
    return f"{BASE_URL}/fight-details/{fight_id}"
