"""Shared fixtures for scraper tests."""

from pathlib import Path
from typing import Optional

import pytest

from ufc_stats.scraper import FetchError, UFCStatsClient
from ufc_stats.scraper.client import completed_events_url, make_soup

FIXTURES = Path(__file__).parent / "fixtures"

EVENT_URL = "http://ufcstats.com/event-details/bbb222"
FIGHT1_URL = "http://ufcstats.com/fight-details/fff111"
FIGHT2_URL = "http://ufcstats.com/fight-details/fff222"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def soup_fixture(name: str):
    return make_soup(load_fixture(name))


class FakeClient(UFCStatsClient):
    """Serves fixture pages by URL instead of hitting the network."""

    def __init__(self, pages: dict[str, str], failing: Optional[set[str]] = None):
        super().__init__(delay_seconds=0)
        self.pages = pages
        self.failing = failing or set()
        self.requested: list[str] = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        if url in self.failing:
            raise FetchError(url, "network error: connection reset")
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status_code=404)
        return load_fixture(self.pages[url])


@pytest.fixture
def site_pages():
    """URL -> fixture file for a small copy of the site."""
    return {
        completed_events_url(): "events.html",
        EVENT_URL: "event.html",
        FIGHT1_URL: "fight_1.html",
        FIGHT2_URL: "fight_2.html",
    }


@pytest.fixture
def fake_client(site_pages):
    return FakeClient(site_pages)
