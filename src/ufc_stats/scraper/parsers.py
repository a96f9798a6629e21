"""HTML parsers for UFCStats.com pages."""

import logging
import re
from datetime import date, datetime
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from .cells import (
    parse_dual_control_time_cell,
    parse_dual_of_stat_cell,
    parse_dual_stat_cell,
    parse_int,
    split_cell_lines,
)
from .errors import StructuralError
from .models import (
    EventRecord,
    EventSummary,
    FightDetail,
    FightSummary,
    RoundStat,
    StatBlock,
)

logger = logging.getLogger(__name__)

CellParser = Callable[[Optional[str]], tuple]

# Per-round totals table: Fighter, KD, Sig. str., Sig. str. %, Total str., Td, Td %,
# Sub. att, Rev., Ctrl
TOTALS_COLUMNS: dict[int, tuple[str, CellParser]] = {
    1: ("knockdowns", parse_dual_stat_cell),
    2: ("significant_strikes", parse_dual_of_stat_cell),
    4: ("total_strikes", parse_dual_of_stat_cell),
    5: ("takedowns", parse_dual_of_stat_cell),
    7: ("submission_attempts", parse_dual_stat_cell),
    8: ("reversals", parse_dual_stat_cell),
    9: ("control_time_seconds", parse_dual_control_time_cell),
}

# Per-round significant strikes table: Fighter, Sig. str, Sig. str. %, Head, Body,
# Leg, Distance, Clinch, Ground
TARGET_COLUMNS: dict[int, tuple[str, CellParser]] = {
    3: ("head_strikes", parse_dual_of_stat_cell),
    4: ("body_strikes", parse_dual_of_stat_cell),
    5: ("leg_strikes", parse_dual_of_stat_cell),
    6: ("distance_strikes", parse_dual_of_stat_cell),
    7: ("clinch_strikes", parse_dual_of_stat_cell),
    8: ("ground_strikes", parse_dual_of_stat_cell),
}

# Event page fight table column positions
FIGHT_ROW_RESULT = 0
FIGHT_ROW_FIGHTERS = 1
FIGHT_ROW_WEIGHT_CLASS = 6
FIGHT_ROW_METHOD = 7
FIGHT_ROW_ROUND = 8
FIGHT_ROW_TIME = 9

METHOD_PATTERN = re.compile(r"Method:\s*(.+?)\s*(?:Round:|$)")
ROUND_PATTERN = re.compile(r"Round:\s*(\d+)")
TIME_PATTERN = re.compile(r"\bTime:\s*(\d+:\d+)")
TIME_FORMAT_PATTERN = re.compile(r"Time format:\s*(.+?)\s*(?:Referee:|$)")
REFEREE_PATTERN = re.compile(r"Referee:\s*(.+?)(?:\s+\w+:|$)")
JUDGE_SCORE_PATTERN = re.compile(r"\d+\s*-\s*\d+")
BLANK_LINE_PATTERN = re.compile(r"\n[ \t]*\n")


def _get_text(element: Optional[Tag]) -> str:
    """Safely extract text from element."""
    if element is None:
        return ""
    return element.get_text(strip=True)


def _collapse(text: str) -> str:
    """Trim and collapse runs of whitespace to single spaces."""
    return re.sub(r"\s+", " ", text).strip()


def _parse_date(date_str: str) -> Optional[date]:
    """Parse date string like 'January 18, 2025'."""
    if not date_str or date_str == "--":
        return None
    try:
        return datetime.strptime(date_str.strip(), "%B %d, %Y").date()
    except ValueError:
        pass
    # Try alternate format
    try:
        return datetime.strptime(date_str.strip(), "%b %d, %Y").date()
    except ValueError:
        return None


# -----------------------------------------------------------------------------
# Event Parsers
# -----------------------------------------------------------------------------


def parse_events_list(soup: BeautifulSoup) -> list[EventSummary]:
    """
    Parse the completed events listing page.

    Date and location are kept as raw text; rows without an event link are
    skipped.
    """
    events = []
    for row in soup.select("tr.b-statistics__table-row"):
        if row.find("th"):
            continue

        cells = row.select("td.b-statistics__table-col")
        if not cells:
            continue
        link = cells[0].select_one("a.b-link")
        if link is None or not link.get("href"):
            continue

        events.append(
            EventSummary(
                name=_get_text(link),
                url=link["href"].strip(),
                date_text=_get_text(cells[0].select_one("span.b-statistics__date")),
                location_text=_get_text(cells[1]) if len(cells) > 1 else "",
            )
        )

    return events


def _find_list_item(soup: BeautifulSoup, label: str) -> Optional[str]:
    """Return the value of a 'Label: value' info list item."""
    for item in soup.select("li.b-list__box-list-item"):
        text = item.get_text()
        if label in text:
            return _collapse(text.replace(label, ""))
    return None


def parse_event_details(soup: BeautifulSoup) -> EventRecord:
    """
    Parse a single event details page into its metadata and fight rows.

    Raises:
        StructuralError: if the document has no event title
    """
    name = _get_text(soup.select_one("h2.b-content__title span.b-content__title-highlight"))
    if not name:
        raise StructuralError("Page has no event title; not an event details page")

    date_text = _find_list_item(soup, "Date:")
    location = _find_list_item(soup, "Location:") or None

    return EventRecord(
        name=name,
        date=_parse_date(date_text) if date_text else None,
        location=location,
        fights=parse_fight_rows(soup),
    )


def parse_fight_rows(soup: BeautifulSoup) -> list[FightSummary]:
    """Parse the fight table of an event page, one summary per linked row."""
    fights = []
    for row in soup.select("tr.b-fight-details__table-row[data-link]"):
        fight = _parse_fight_row(row)
        if fight is not None:
            fights.append(fight)
    return fights


def _parse_fight_row(row: Tag) -> Optional[FightSummary]:
    fight_url = (row.get("data-link") or "").strip()
    if not fight_url:
        return None

    cells = row.select("td.b-fight-details__table-col")

    def cell_text(index: int) -> str:
        return cells[index].get_text() if index < len(cells) else ""

    fighters = []
    if len(cells) > FIGHT_ROW_FIGHTERS:
        fighters = [_get_text(a) for a in cells[FIGHT_ROW_FIGHTERS].select("a.b-link")]
    if len(fighters) < 2:
        logger.debug(f"Skipping fight row without two fighters: {fight_url}")
        return None

    flag = ""
    if len(cells) > FIGHT_ROW_RESULT:
        flag = _get_text(cells[FIGHT_ROW_RESULT].select_one("i.b-flag__text")).lower()

    weight_lines = split_cell_lines(cell_text(FIGHT_ROW_WEIGHT_CLASS))

    return FightSummary(
        fighter1=fighters[0],
        fighter2=fighters[1],
        fight_url=fight_url,
        # Winner is always listed first; "draw" and "nc" rows have no winner
        winner=fighters[0] if flag == "win" else None,
        weight_class=weight_lines[0] if weight_lines else "Unknown",
        method=_collapse(cell_text(FIGHT_ROW_METHOD)),
        round=parse_int(cell_text(FIGHT_ROW_ROUND)),
        time=_collapse(cell_text(FIGHT_ROW_TIME)),
    )


# -----------------------------------------------------------------------------
# Fight Parsers
# -----------------------------------------------------------------------------


def _label_text(soup: BeautifulSoup, label: str) -> Optional[str]:
    """Whitespace-collapsed text of the first detail paragraph holding a label."""
    for paragraph in soup.select("p.b-fight-details__text"):
        text = paragraph.get_text()
        if label in text:
            return _collapse(text)
    return None


def _person_name(person: Tag) -> Optional[str]:
    name = _get_text(person.select_one("h3.b-fight-details__person-name a"))
    return name or None


def extract_fighters(soup: BeautifulSoup) -> tuple[Optional[str], Optional[str]]:
    """Names from the first two fighter blocks, in page order."""
    persons = soup.select("div.b-fight-details__person")
    names = [_person_name(person) for person in persons[:2]]
    names += [None] * (2 - len(names))
    return names[0], names[1]


def extract_winner(soup: BeautifulSoup) -> Optional[str]:
    """Name of the fighter carrying the green 'W' marker, None for draws/NC."""
    for person in soup.select("div.b-fight-details__person"):
        if person.select_one("i.b-fight-details__person-status_style_green"):
            return _person_name(person)
    return None


def extract_method(soup: BeautifulSoup) -> Optional[str]:
    """Text between the 'Method:' and 'Round:' labels."""
    text = _label_text(soup, "Method:")
    if text is None:
        return None
    match = METHOD_PATTERN.search(text)
    return match.group(1) if match else None


def extract_round(soup: BeautifulSoup) -> Optional[int]:
    """First integer after the 'Round:' label."""
    text = _label_text(soup, "Round:")
    if text is None:
        return None
    match = ROUND_PATTERN.search(text)
    return int(match.group(1)) if match else None


def extract_time(soup: BeautifulSoup) -> Optional[str]:
    """Clock time after 'Time:'; the 'Time format:' label never matches."""
    text = _label_text(soup, "Time:")
    if text is None:
        return None
    match = TIME_PATTERN.search(text)
    return match.group(1) if match else None


def extract_time_format(soup: BeautifulSoup) -> Optional[str]:
    """Text between the 'Time format:' and 'Referee:' labels."""
    text = _label_text(soup, "Time format:")
    if text is None:
        return None
    match = TIME_FORMAT_PATTERN.search(text)
    return match.group(1) if match else None


def extract_referee(soup: BeautifulSoup) -> Optional[str]:
    """Text after 'Referee:' up to the next label or the end."""
    text = _label_text(soup, "Referee:")
    if text is None:
        return None
    match = REFEREE_PATTERN.search(text)
    return match.group(1) if match else None


def _details_from_label(soup: BeautifulSoup) -> Optional[str]:
    section = soup.select_one("div.b-fight-details__fight")
    if section is None:
        return None

    # The Details paragraph bounds the value; otherwise stop at the first blank line
    paragraph = None
    for candidate in section.select("p.b-fight-details__text"):
        if "Details:" in candidate.get_text():
            paragraph = candidate
            break

    full_text = (paragraph or section).get_text()
    if "Details:" not in full_text:
        return None

    details = full_text.split("Details:", 1)[1].strip()
    if paragraph is None:
        details = BLANK_LINE_PATTERN.split(details, 1)[0]
    return _collapse(details) or None


def _details_from_judge_scores(soup: BeautifulSoup) -> Optional[str]:
    scores = []
    for paragraph in soup.select("p.b-fight-details__text"):
        text = paragraph.get_text()
        # "5 Rnd (5-5-5-5-5)" looks like a score
        if "Time format:" in text:
            continue
        if JUDGE_SCORE_PATTERN.search(text):
            scores.append(text)
    return _collapse(" ".join(scores)) or None


def extract_details(soup: BeautifulSoup) -> Optional[str]:
    """Free-text 'Details:' value, falling back to judge scores for decisions."""
    return _details_from_label(soup) or _details_from_judge_scores(soup)


def parse_fight_details(soup: BeautifulSoup) -> FightDetail:
    """
    Parse a single fight details page.

    Every field is extracted independently; a missing label leaves only that
    field empty.

    Raises:
        StructuralError: if the page has neither fighter blocks nor detail text
    """
    if not soup.select("div.b-fight-details__person") and not soup.select("p.b-fight-details__text"):
        raise StructuralError("Page has no fighters or fight details; not a fight details page")

    fighter1, fighter2 = extract_fighters(soup)
    return FightDetail(
        fighter1=fighter1,
        fighter2=fighter2,
        winner=extract_winner(soup),
        method=extract_method(soup),
        round=extract_round(soup),
        time=extract_time(soup),
        time_format=extract_time_format(soup),
        referee=extract_referee(soup),
        details=extract_details(soup),
        rounds=extract_round_stats(soup),
    )


# -----------------------------------------------------------------------------
# Round Statistics
# -----------------------------------------------------------------------------

RowValues = tuple[dict, dict]


def parse_stat_row(cells: list[str], columns: dict[int, tuple[str, CellParser]]) -> RowValues:
    """Map one table row's cell texts to per-fighter StatBlock keyword values."""
    fighter1, fighter2 = {}, {}
    for index, (field_name, parser) in columns.items():
        if index >= len(cells):
            continue
        value1, value2 = parser(cells[index])
        fighter1[field_name] = value1
        fighter2[field_name] = value2
    return fighter1, fighter2


def assemble_rounds(totals: list[RowValues], targets: Optional[list[RowValues]] = None) -> list[RoundStat]:
    """
    Build RoundStats from parsed totals rows and optional by-target rows.

    Rows are numbered by position starting at 1. By-target rows are merged into
    the totals round with the same number; a totals round without one keeps
    zeroed strike targets and extra by-target rows are dropped.
    """
    targets = targets or []
    if targets and len(targets) != len(totals):
        logger.debug(f"Per-round tables disagree: {len(totals)} totals rows, {len(targets)} target rows")

    rounds = []
    for index, (fighter1, fighter2) in enumerate(totals):
        if index < len(targets):
            target1, target2 = targets[index]
            fighter1 = {**fighter1, **target1}
            fighter2 = {**fighter2, **target2}
        rounds.append(
            RoundStat(
                round=index + 1,
                fighter1_stats=StatBlock(**fighter1),
                fighter2_stats=StatBlock(**fighter2),
            )
        )

    return sorted(rounds, key=lambda r: r.round)


def _per_round_sections(soup: BeautifulSoup) -> list[Tag]:
    """Sections offering a 'Per round' view."""
    sections = []
    for section in soup.select("section.b-fight-details__section"):
        if any(_get_text(a).lower() == "per round" for a in section.find_all("a")):
            sections.append(section)
    return sections


def _table_rows(section: Tag) -> list[list[str]]:
    """Cell texts of each data row in the section's first stats table."""
    table = section.select_one("table.b-fight-details__table")
    if table is None:
        return []
    rows = []
    for tr in table.find_all("tr"):
        cells = tr.find_all("td")
        if cells:
            rows.append([cell.get_text() for cell in cells])
    return rows


def extract_round_stats(soup: BeautifulSoup) -> list[RoundStat]:
    """Per-round stats from the totals table, merged with the by-target table."""
    sections = _per_round_sections(soup)
    if not sections:
        return []

    totals = [parse_stat_row(cells, TOTALS_COLUMNS) for cells in _table_rows(sections[0])]

    targets = None
    for section in sections[1:]:
        if "Significant Strikes" in section.get_text():
            targets = [parse_stat_row(cells, TARGET_COLUMNS) for cells in _table_rows(section)]
            break

    return assemble_rounds(totals, targets)
