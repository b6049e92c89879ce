from __future__ import annotations

from datetime import time
from typing import Iterable, Optional

from ..core.enums import EventKind, Location
from ..events.model import Event


def distinct_locations(events: Iterable[Event]) -> set[Location]:
    return {e.location for e in events}


def aggregate_day_position(events: Iterable[Event]) -> Optional[Location]:
    """None without events, the single location if all agree, otherwise Mixed."""
    locations = distinct_locations(events)
    if not locations:
        return None
    if len(locations) == 1:
        return next(iter(locations))
    return Location.MIXED


def day_bounds(events: Iterable[Event]) -> tuple[Optional[time], Optional[time]]:
    """Earliest and latest event time of the day."""
    times = [e.time for e in events]
    if not times:
        return None, None
    return min(times), max(times)


def latest_out_lunch(events: Iterable[Event]) -> Optional[int]:
    """Lunch of the latest OUT, None when the day has no OUT."""
    outs = [e for e in events if e.kind == EventKind.OUT]
    if not outs:
        return None
    return max(outs, key=Event.sort_key).lunch
