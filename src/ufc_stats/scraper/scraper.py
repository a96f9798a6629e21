"""Main scraper orchestration for UFCStats.com."""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Optional

from .client import UFCStatsClient, completed_events_url
from .config import ScrapeConfig
from .errors import ScraperError
from .export import project_event
from .models import (
    BackfillResult,
    CSVExport,
    EventExtraction,
    EventSummary,
    FightDetail,
    FightFailure,
    FightSummary,
)
from .parsers import parse_event_details, parse_events_list, parse_fight_details
from .resolver import resolve_event_url

logger = logging.getLogger(__name__)


class UFCScraper:
    """Crawls UFCStats.com: event list, event pages and fight pages."""

    def __init__(
        self,
        client: Optional[UFCStatsClient] = None,
        config: Optional[ScrapeConfig] = None,
    ):
        """Initialize scraper with HTTP client and crawl configuration."""
        self.config = config or ScrapeConfig()
        self.client = client or UFCStatsClient(
            delay_seconds=self.config.delay_seconds,
            timeout=self.config.request_timeout,
            retry=self.config.retry_policy(),
        )

    def scrape_completed_events_list(self) -> list[EventSummary]:
        """Fetch every completed event from the all-at-once listing."""
        logger.info("Fetching all events...")
        soup = self.client.get(completed_events_url())
        events = parse_events_list(soup)
        logger.info(f"Found {len(events)} total events")
        return events

    def find_event_url(
        self, event_name: str, events: Optional[Sequence[EventSummary]] = None
    ) -> Optional[str]:
        """Resolve an event name to its URL, fetching the listing if not given."""
        if events is None:
            events = self.scrape_completed_events_list()
        return resolve_event_url(event_name, events)

    def scrape_fight_details(self, fight_url: str) -> FightDetail:
        """Fetch and parse a single fight page."""
        soup = self.client.get(fight_url)
        return parse_fight_details(soup)

    def scrape_event(self, event_url: str) -> EventExtraction:
        """
        Scrape an event page and the detail page of each of its fights.

        Fight pages are fetched in parallel. A fight whose page fails keeps its
        event-page fields and is listed in ``failures``.

        Raises:
            FetchError: if the event page itself cannot be fetched
            StructuralError: if the event page is not recognizable
        """
        soup = self.client.get(event_url)
        event = parse_event_details(soup)
        logger.info(f"Scraping {len(event.fights)} fights for {event.name}")

        details, failures = self._scrape_fights(event.fights)
        fights = [replace(fight, detail=details.get(fight.fight_url)) for fight in event.fights]
        event = replace(event, fights=fights)

        logger.info(f"Scraped event: {event.name} ({len(fights)} fights, {len(failures)} failed)")
        return EventExtraction(event=event, failures=failures)

    def _scrape_fights(
        self, fights: Sequence[FightSummary]
    ) -> tuple[dict[str, FightDetail], list[FightFailure]]:
        """
        Fetch fight pages with bounded concurrency.

        Returns details keyed by fight URL, plus one failure per fight that
        raised or did not finish before the configured deadline.

        Fetches already running at the deadline are not interrupted; they
        finish in the background and their results are discarded.
        """
        bouts = {}
        for fight in fights:
            bouts.setdefault(fight.fight_url, fight.bout)

        details: dict[str, FightDetail] = {}
        failures: list[FightFailure] = []
        if not bouts:
            return details, failures

        executor = ThreadPoolExecutor(max_workers=max(1, self.config.max_workers))
        try:
            futures = {url: executor.submit(self.scrape_fight_details, url) for url in bouts}
            wait(futures.values(), timeout=self.config.timeout_seconds)

            for url, future in futures.items():
                if not future.done():
                    future.cancel()
                    reason = f"timed out after {self.config.timeout_seconds}s"
                    logger.warning(f"Gave up on fight {bouts[url]}: {reason}")
                    failures.append(FightFailure(fight_url=url, bout=bouts[url], reason=reason))
                    continue
                try:
                    details[url] = future.result()
                except Exception as e:
                    logger.warning(f"Could not fetch fight details for {bouts[url]}: {e}")
                    failures.append(FightFailure(fight_url=url, bout=bouts[url], reason=str(e)))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return details, failures

    def scrape_to_csv(self, event_url: str) -> CSVExport:
        """Scrape an event and project it to importer CSV rows."""
        return project_event(self.scrape_event(event_url))

    def backfill(
        self, event_names: Iterable[str], events: Optional[Sequence[EventSummary]] = None
    ) -> list[BackfillResult]:
        """
        Resolve each event name against the listing and scrape the match.

        Unresolved names and failing event pages are reported in the results
        instead of stopping the run.
        """
        if events is None:
            events = self.scrape_completed_events_list()

        results = []
        for name in event_names:
            url = resolve_event_url(name, events)
            if url is None:
                logger.warning(f"Could not find URL for event: {name}")
                results.append(BackfillResult(name=name))
                continue

            logger.info(f"Found event URL for {name}: {url}")
            try:
                extraction = self.scrape_event(url)
            except ScraperError as e:
                logger.error(f"Failed to scrape event {name}: {e}")
                results.append(BackfillResult(name=name, url=url, error=str(e)))
                continue
            results.append(BackfillResult(name=name, url=url, extraction=extraction))

        return results
