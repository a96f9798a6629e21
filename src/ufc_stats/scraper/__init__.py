"""UFCStats.com event and fight extraction."""

from .client import UFCStatsClient
from .config import ScrapeConfig
from .errors import FetchError, ScraperError, StructuralError
from .export import calculate_percentage, format_control_time, project_event, write_export
from .models import (
    BackfillResult,
    CSVExport,
    EventExtraction,
    EventRecord,
    EventSummary,
    FightDetail,
    FightFailure,
    FightSummary,
    RoundStat,
    StatBlock,
    StrikePair,
)
from .resolver import resolve_event_url
from .scraper import UFCScraper

__all__ = [
    "BackfillResult",
    "CSVExport",
    "EventExtraction",
    "EventRecord",
    "EventSummary",
    "FetchError",
    "FightDetail",
    "FightFailure",
    "FightSummary",
    "RoundStat",
    "ScrapeConfig",
    "ScraperError",
    "StatBlock",
    "StrikePair",
    "StructuralError",
    "UFCScraper",
    "UFCStatsClient",
    "calculate_percentage",
    "format_control_time",
    "project_event",
    "resolve_event_url",
    "write_export",
]
