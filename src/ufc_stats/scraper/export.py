"""CSV projection of scraped events for the fight and fight-stat importers."""

import csv
import logging
import math
from pathlib import Path

from .models import (
    CSVExport,
    EventExtraction,
    EventRecord,
    FightSummary,
    RoundStat,
    StatBlock,
    StrikePair,
)

logger = logging.getLogger(__name__)

FIGHT_COLUMNS = [
    "EVENT",
    "BOUT",
    "OUTCOME",
    "WEIGHTCLASS",
    "METHOD",
    "ROUND",
    "TIME",
    "TIME FORMAT",
    "REFEREE",
    "DETAILS",
    "URL",
]

FIGHT_STAT_COLUMNS = [
    "EVENT",
    "BOUT",
    "ROUND",
    "FIGHTER",
    "KD",
    "SIG.STR.",
    "SIG.STR. %",
    "TOTAL STR.",
    "TD",
    "TD %",
    "SUB.ATT",
    "REV.",
    "CTRL",
    "HEAD",
    "BODY",
    "LEG",
    "DISTANCE",
    "CLINCH",
    "GROUND",
]

# Column name -> StatBlock attribute for the strike target breakdown
TARGET_STAT_COLUMNS = {
    "HEAD": "head_strikes",
    "BODY": "body_strikes",
    "LEG": "leg_strikes",
    "DISTANCE": "distance_strikes",
    "CLINCH": "clinch_strikes",
    "GROUND": "ground_strikes",
}

NO_CONTEST_MARKERS = ("No Contest", "Overturned", "Could Not Continue")

FIGHTS_FILENAME = "fights.csv"
FIGHT_STATS_FILENAME = "fight_stats.csv"


def calculate_percentage(landed: int, attempted: int) -> str:
    """Accuracy like '48%', or '---' when nothing was attempted."""
    if attempted == 0:
        return "---"
    # Half rounds up, not to even
    return f"{math.floor(landed / attempted * 100 + 0.5)}%"


def format_control_time(seconds: int) -> str:
    """Format seconds as M:SS."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_strike_stat(pair: StrikePair) -> str:
    """Format a tally as '<landed> of <attempted>'."""
    return f"{pair.landed} of {pair.attempted}"


def determine_outcome(fight: FightSummary) -> str:
    """Outcome code from the first-listed fighter's perspective."""
    detail = fight.detail
    # Detail page first, then the listing flag
    candidates = (detail.winner if detail is not None else None, fight.winner)
    for winner in candidates:
        if winner is None:
            continue
        if winner == fight.fighter1:
            return "W/L"
        if winner == fight.fighter2:
            return "L/W"
    method = fight.resolved_method
    if any(marker in method for marker in NO_CONTEST_MARKERS):
        return "NC/NC"
    return "D/D"


def build_fight_row(event: EventRecord, fight: FightSummary) -> dict:
    """One fights.csv row."""
    detail = fight.detail
    round_finished = detail.round if detail is not None and detail.round is not None else fight.round
    time_finished = detail.time if detail is not None and detail.time else fight.time
    return {
        "EVENT": event.name,
        "BOUT": fight.bout,
        "OUTCOME": determine_outcome(fight),
        "WEIGHTCLASS": fight.weight_class,
        "METHOD": fight.resolved_method,
        "ROUND": round_finished,
        "TIME": time_finished,
        "TIME FORMAT": (detail.time_format if detail is not None else None) or "",
        "REFEREE": (detail.referee if detail is not None else None) or "",
        "DETAILS": (detail.details if detail is not None else None) or "",
        "URL": fight.fight_url,
    }


def build_fight_stat_row(
    event: EventRecord, fight: FightSummary, round_stat: RoundStat, fighter: str, stats: StatBlock
) -> dict:
    """One fight_stats.csv row for one fighter in one round."""
    row = {
        "EVENT": event.name,
        "BOUT": fight.bout,
        "ROUND": f"Round {round_stat.round}",
        "FIGHTER": fighter,
        "KD": stats.knockdowns,
        "SIG.STR.": format_strike_stat(stats.significant_strikes),
        "SIG.STR. %": calculate_percentage(
            stats.significant_strikes.landed, stats.significant_strikes.attempted
        ),
        "TOTAL STR.": format_strike_stat(stats.total_strikes),
        "TD": format_strike_stat(stats.takedowns),
        "TD %": calculate_percentage(stats.takedowns.landed, stats.takedowns.attempted),
        "SUB.ATT": stats.submission_attempts,
        "REV.": stats.reversals,
        "CTRL": format_control_time(stats.control_time_seconds),
    }
    for column, attribute in TARGET_STAT_COLUMNS.items():
        row[column] = format_strike_stat(getattr(stats, attribute))
    return row


def fight_rows(event: EventRecord) -> list[dict]:
    """fights.csv rows for every fight whose detail page was extracted."""
    return [build_fight_row(event, fight) for fight in event.fights if fight.detail is not None]


def fight_stat_rows(event: EventRecord) -> list[dict]:
    """fight_stats.csv rows: two per round, fighter1 first."""
    rows = []
    for fight in event.fights:
        if not fight.rounds:
            logger.info(f"No round data found for {fight.bout}")
            continue
        fighter1 = fight.detail.fighter1 or fight.fighter1
        fighter2 = fight.detail.fighter2 or fight.fighter2
        for round_stat in fight.rounds:
            rows.append(build_fight_stat_row(event, fight, round_stat, fighter1, round_stat.fighter1_stats))
            rows.append(build_fight_stat_row(event, fight, round_stat, fighter2, round_stat.fighter2_stats))
    return rows


def project_event(extraction: EventExtraction) -> CSVExport:
    """Project a scraped event into importer rows, carrying its failures along."""
    return CSVExport(
        fights=fight_rows(extraction.event),
        fight_stats=fight_stat_rows(extraction.event),
        failures=list(extraction.failures),
    )


def write_csv(rows: list[dict], path: Path, columns: list[str], append: bool = False) -> Path:
    """Write rows to a CSV file, adding the header unless appending to existing data."""
    path.parent.mkdir(parents=True, exist_ok=True)
    write_header = not (append and path.exists() and path.stat().st_size > 0)
    with open(path, "a" if append else "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        if write_header:
            writer.writeheader()
        writer.writerows(rows)
    return path


def write_export(
    export: CSVExport, directory: Path, append: bool = False
) -> tuple[Path, Path]:
    """Write fights.csv and fight_stats.csv into a directory."""
    fights_path = write_csv(export.fights, directory / FIGHTS_FILENAME, FIGHT_COLUMNS, append=append)
    stats_path = write_csv(
        export.fight_stats, directory / FIGHT_STATS_FILENAME, FIGHT_STAT_COLUMNS, append=append
    )
    logger.info(f"Wrote {len(export.fights)} fights and {len(export.fight_stats)} stat rows to {directory}")
    return fights_path, stats_path


def merge_exports(exports: list[CSVExport]) -> CSVExport:
    """Concatenate several event exports into one."""
    merged = CSVExport()
    for export in exports:
        merged = CSVExport(
            fights=merged.fights + export.fights,
            fight_stats=merged.fight_stats + export.fight_stats,
            failures=merged.failures + export.failures,
        )
    return merged
