"""Command-line interface for UFC scraper."""

import argparse
import logging
import sys
from pathlib import Path

from .config import ScrapeConfig
from .errors import ScraperError
from .export import merge_exports, project_event, write_export
from .models import EventExtraction
from .scraper import UFCScraper


def _print_extraction(extraction: EventExtraction) -> None:
    event = extraction.event
    print(f"{event.name} ({event.date or 'unknown date'}, {event.location or 'unknown location'})")
    for fight in event.fights:
        rounds = len(fight.rounds)
        print(f"  {fight.bout} - {fight.resolved_method} R{fight.round} {fight.time} ({rounds} rounds of stats)")
    for failure in extraction.failures:
        print(f"  FAILED {failure.bout}: {failure.reason}")
    for url, fields in extraction.missing_fields.items():
        print(f"  Missing {', '.join(fields)} for {url}")


def main():
    """Run the scraper CLI."""
    parser = argparse.ArgumentParser(description="Scrape UFC event and fight data from UFCStats.com")
    parser.add_argument(
        "command",
        choices=["events", "resolve", "event", "csv", "backfill"],
        help="Command to run",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help="Event name(s) for 'resolve'/'backfill', event URL for 'event'/'csv'",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("supplemental_data"),
        help="Directory for fights.csv and fight_stats.csv (default: supplemental_data)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Delay between requests in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Fight pages fetched concurrently per event (default: 4)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up on an event's remaining fight pages after this many seconds",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retry transient HTTP failures this many times (default: 0)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    config = ScrapeConfig(
        delay_seconds=args.delay,
        max_workers=args.workers,
        timeout_seconds=args.timeout,
        max_retries=args.retries,
    )
    scraper = UFCScraper(config=config)

    if args.command != "events" and not args.targets:
        parser.error(f"'{args.command}' needs at least one target")

    try:
        if args.command == "events":
            for event in scraper.scrape_completed_events_list():
                print(f"{event.date_text:<20} {event.name:<60} {event.url}")

        elif args.command == "resolve":
            events = scraper.scrape_completed_events_list()
            for name in args.targets:
                url = scraper.find_event_url(name, events)
                print(f"{name}: {url or 'not found'}")

        elif args.command == "event":
            _print_extraction(scraper.scrape_event(args.targets[0]))

        elif args.command == "csv":
            extraction = scraper.scrape_event(args.targets[0])
            export = project_event(extraction)
            fights_path, stats_path = write_export(export, args.out)
            print(f"Wrote {len(export.fights)} fights to {fights_path}")
            print(f"Wrote {len(export.fight_stats)} stat rows to {stats_path}")
            for failure in export.failures:
                print(f"  FAILED {failure.bout}: {failure.reason}")

        elif args.command == "backfill":
            results = scraper.backfill(args.targets)
            exports = []
            for result in results:
                if result.url is None:
                    print(f"Could not find URL for event: {result.name}")
                elif result.error:
                    print(f"Error scraping {result.name}: {result.error}")
                else:
                    _print_extraction(result.extraction)
                    exports.append(project_event(result.extraction))
            if exports:
                export = merge_exports(exports)
                write_export(export, args.out, append=True)
                print(f"Appended {len(export.fights)} fights and {len(export.fight_stats)} stat rows to {args.out}")

    except ScraperError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
