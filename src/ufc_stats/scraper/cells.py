"""Parsers for individual stat-table cells.

A UFCStats stats cell holds both fighters' values one above the other, e.g.
``"11 of 23\\n\\n\\n4 of 9"``. Every parser here returns zero values for
missing or malformed text instead of raising.
"""

import re
from typing import Optional

from .models import StrikePair

OF_STAT_PATTERN = re.compile(r"(\d+)\s*of\s*(\d+)")
DURATION_PATTERN = re.compile(r"(\d+):(\d+)")


def split_cell_lines(text: Optional[str]) -> list[str]:
    """Split cell text into its non-empty, stripped lines."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def _line(lines: list[str], index: int) -> Optional[str]:
    return lines[index] if index < len(lines) else None


def parse_int(text: Optional[str]) -> int:
    """Parse a leading integer like '2' or '0'; anything else is 0."""
    if not text:
        return 0
    match = re.match(r"\d+", text.strip())
    return int(match.group(0)) if match else 0


def parse_of_stat(text: Optional[str]) -> StrikePair:
    """Parse a tally like '45 of 89' to StrikePair(45, 89)."""
    if not text or text == "--":
        return StrikePair()
    match = OF_STAT_PATTERN.search(text)
    if match:
        return StrikePair(landed=int(match.group(1)), attempted=int(match.group(2)))
    return StrikePair()


def parse_time_to_seconds(text: Optional[str]) -> int:
    """Parse a duration like '2:35' to seconds."""
    if not text or text == "--":
        return 0
    match = DURATION_PATTERN.search(text)
    if match:
        minutes, seconds = int(match.group(1)), int(match.group(2))
        return minutes * 60 + seconds
    return 0


def parse_dual_stat_cell(text: Optional[str]) -> tuple[int, int]:
    """Parse a single-value cell such as knockdowns into (fighter1, fighter2)."""
    lines = split_cell_lines(text)
    return parse_int(_line(lines, 0)), parse_int(_line(lines, 1))


def parse_dual_of_stat_cell(text: Optional[str]) -> tuple[StrikePair, StrikePair]:
    """Parse an 'X of Y' cell into one StrikePair per fighter."""
    lines = split_cell_lines(text)
    return parse_of_stat(_line(lines, 0)), parse_of_stat(_line(lines, 1))


def parse_dual_control_time_cell(text: Optional[str]) -> tuple[int, int]:
    """Parse a control-time cell into seconds per fighter."""
    lines = split_cell_lines(text)
    return parse_time_to_seconds(_line(lines, 0)), parse_time_to_seconds(_line(lines, 1))
