"""Scraper configuration."""

from dataclasses import dataclass
from typing import Optional

from urllib3.util.retry import Retry


@dataclass(frozen=True)
class ScrapeConfig:
    """Tunable parameters for a crawl.

    Retries are off by default; set ``max_retries`` to have the HTTP client
    retry transient failures with exponential backoff.
    """

    delay_seconds: float = 1.0  # Minimum gap between two requests
    request_timeout: float = 30.0
    max_workers: int = 4  # Concurrent fight-detail fetches per event
    timeout_seconds: Optional[float] = None  # Deadline for one event's fan-out
    max_retries: int = 0
    backoff_factor: float = 0.8

    def retry_policy(self) -> Optional[Retry]:
        """Build the urllib3 retry policy, or None when retries are disabled."""
        if self.max_retries <= 0:
            return None
        return Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods={"GET", "HEAD"},
            raise_on_status=False,
        )
