"""Keep events that fit the lunch window and order them by start time."""
from __future__ import annotations

from datetime import time
from typing import Iterable, List

from ingest.schemas import Event
from pipeline.utils import parse_timestamp, sort_key

LUNCH_START_HOUR = 12
LUNCH_END = time(13, 0, 0)


def is_lunch_event(event: Event) -> bool:
    """Return True if ``event`` starts in the 12 o'clock hour and ends by 13:00.

    Hours are read from the timestamps as written, so an event is judged in
    whatever local time the upstream reported it.
    """
    start = parse_timestamp(event.started_at)
    end = parse_timestamp(event.ended_at)
    if start.hour != LUNCH_START_HOUR:
        return False
    if end.hour == LUNCH_START_HOUR:
        return True
    return end.time() == LUNCH_END


def filter_lunch_events(events: Iterable[Event]) -> List[Event]:
    """Return the events that pass :func:`is_lunch_event`, order preserved."""
    return [event for event in events if is_lunch_event(event)]


def sort_by_start(events: Iterable[Event], tz: str | None = None) -> List[Event]:
    """Return ``events`` sorted by start time; ties keep their input order."""
    return sorted(events, key=lambda event: sort_key(event.started_at, tz))
