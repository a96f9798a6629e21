"""Data models for UFC scraper."""

import datetime
from dataclasses import dataclass, field, fields
from typing import Optional


@dataclass(frozen=True)
class StrikePair:
    """Landed/attempted tally such as "11 of 23"."""

    landed: int = 0
    attempted: int = 0


@dataclass(frozen=True)
class StatBlock:
    """One fighter's stats for a single round."""

    knockdowns: int = 0
    submission_attempts: int = 0
    reversals: int = 0
    control_time_seconds: int = 0
    significant_strikes: StrikePair = field(default_factory=StrikePair)
    total_strikes: StrikePair = field(default_factory=StrikePair)
    takedowns: StrikePair = field(default_factory=StrikePair)
    # Significant strikes by target and position
    head_strikes: StrikePair = field(default_factory=StrikePair)
    body_strikes: StrikePair = field(default_factory=StrikePair)
    leg_strikes: StrikePair = field(default_factory=StrikePair)
    distance_strikes: StrikePair = field(default_factory=StrikePair)
    clinch_strikes: StrikePair = field(default_factory=StrikePair)
    ground_strikes: StrikePair = field(default_factory=StrikePair)


@dataclass(frozen=True)
class RoundStat:
    """Both fighters' stats for one round."""

    round: int
    fighter1_stats: StatBlock = field(default_factory=StatBlock)
    fighter2_stats: StatBlock = field(default_factory=StatBlock)


@dataclass(frozen=True)
class FightDetail:
    """Everything read from a single fight-details page.

    Each field comes from its own page section, so any of them may be missing
    without affecting the others.
    """

    fighter1: Optional[str] = None
    fighter2: Optional[str] = None
    winner: Optional[str] = None  # None for draw/NC
    method: Optional[str] = None  # "KO/TKO", "Decision - Unanimous", ...
    round: Optional[int] = None
    time: Optional[str] = None  # "4:32"
    time_format: Optional[str] = None  # "3 Rnd (5-5-5)"
    referee: Optional[str] = None
    details: Optional[str] = None
    rounds: list[RoundStat] = field(default_factory=list)

    def missing_fields(self) -> list[str]:
        """Names of the optional fields that could not be extracted."""
        missing = [f.name for f in fields(self) if f.name != "rounds" and getattr(self, f.name) is None]
        if not self.rounds:
            missing.append("rounds")
        return missing


@dataclass(frozen=True)
class FightSummary:
    """A fight row from an event page, plus its detail page once fetched."""

    fighter1: str
    fighter2: str
    fight_url: str
    winner: Optional[str] = None
    weight_class: str = "Unknown"
    method: str = ""
    round: int = 0
    time: str = ""
    detail: Optional[FightDetail] = None

    @property
    def bout(self) -> str:
        """Bout description used as the natural key, e.g. "A vs. B"."""
        return f"{self.fighter1} vs. {self.fighter2}"

    @property
    def rounds(self) -> list[RoundStat]:
        """Per-round stats, empty when the detail page was not extracted."""
        if self.detail is None:
            return []
        return self.detail.rounds

    @property
    def resolved_method(self) -> str:
        """Method from the detail page when available, else the listing text."""
        if self.detail is not None and self.detail.method:
            return self.detail.method
        return self.method


@dataclass(frozen=True)
class EventSummary:
    """An entry of the completed-events listing."""

    name: str
    url: str
    date_text: str = ""
    location_text: str = ""


@dataclass(frozen=True)
class EventRecord:
    """A UFC event with its fights."""

    name: str
    date: Optional[datetime.date] = None
    location: Optional[str] = None
    fights: list[FightSummary] = field(default_factory=list)


@dataclass(frozen=True)
class FightFailure:
    """A fight whose detail page could not be fetched or parsed."""

    fight_url: str
    bout: str
    reason: str


@dataclass(frozen=True)
class EventExtraction:
    """Best-effort result of scraping one event."""

    event: EventRecord
    failures: list[FightFailure] = field(default_factory=list)

    @property
    def missing_fields(self) -> dict[str, list[str]]:
        """Detail fields that were absent, keyed by fight URL."""
        missing = {}
        for fight in self.event.fights:
            if fight.detail is None:
                continue
            absent = fight.detail.missing_fields()
            if absent:
                missing[fight.fight_url] = absent
        return missing

    @property
    def is_complete(self) -> bool:
        """True when every fight's detail page was extracted."""
        return not self.failures


@dataclass(frozen=True)
class CSVExport:
    """Flat rows in the shape the fight and fight-stat importers read."""

    fights: list[dict] = field(default_factory=list)
    fight_stats: list[dict] = field(default_factory=list)
    failures: list[FightFailure] = field(default_factory=list)


@dataclass(frozen=True)
class BackfillResult:
    """Outcome of resolving and scraping one requested event name."""

    name: str
    url: Optional[str] = None  # None when no listing entry matched
    extraction: Optional[EventExtraction] = None
    error: Optional[str] = None  # Event-level fetch/parse failure
