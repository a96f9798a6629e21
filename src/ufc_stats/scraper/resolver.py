"""Match event names against the completed events listing."""

import re
from collections.abc import Sequence
from typing import Optional

from .models import EventSummary


def normalize_event_name(name: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    normalized = re.sub(r"[^a-z0-9\s]", "", name.lower())
    return re.sub(r"\s+", " ", normalized).strip()


def find_exact_match(name: str, candidates: Sequence[EventSummary]) -> Optional[str]:
    """URL of the candidate whose name equals ``name``."""
    for event in candidates:
        if event.name == name:
            return event.url
    return None


def find_normalized_match(name: str, candidates: Sequence[EventSummary]) -> Optional[str]:
    """URL of the candidate whose normalized name equals the normalized ``name``."""
    normalized = normalize_event_name(name)
    for event in candidates:
        if normalize_event_name(event.name) == normalized:
            return event.url
    return None


def find_partial_match(name: str, candidates: Sequence[EventSummary]) -> Optional[str]:
    """URL of the first candidate whose name contains ``name`` or is contained in it."""
    if not name:
        return None
    for event in candidates:
        # An empty name is a substring of everything
        if not event.name:
            continue
        if name in event.name or event.name in name:
            return event.url
    return None


def resolve_event_url(name: str, candidates: Sequence[EventSummary]) -> Optional[str]:
    """
    Find the listing URL for an event name.

    Tries exact, then normalized, then partial matching; the first tier with
    a hit wins. Returns None when nothing matches.
    """
    return (
        find_exact_match(name, candidates)
        or find_normalized_match(name, candidates)
        or find_partial_match(name, candidates)
    )
