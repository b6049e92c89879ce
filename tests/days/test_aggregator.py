from __future__ import annotations

from datetime import date, time
from typing import Optional

from punchclock.common.datetime_utils import parse_hhmm
from punchclock.core.enums import EventKind, Location
from punchclock.days.aggregator import aggregate_day_position, day_bounds, latest_out_lunch
from punchclock.events.model import Event


def _ev(event_id: int, hhmm: str, kind: str, location: Location, lunch: Optional[int] = None) -> Event:
    return Event(
        id=event_id,
        date=date(2025, 1, 2),
        time=parse_hhmm(hhmm),
        kind=EventKind(kind),
        location=location,
        lunch_minutes=lunch,
    )


def test_aggregate_position():
    r = _ev(1, "08:00", "in", Location.REMOTE)
    o = _ev(2, "11:00", "in", Location.OFFICE)
    c = _ev(3, "14:00", "in", Location.ON_SITE)

    assert aggregate_day_position([]) is None
    assert aggregate_day_position([r]) == Location.REMOTE
    assert aggregate_day_position([r, r]) == Location.REMOTE
    assert aggregate_day_position([r, o, c]) == Location.MIXED
    assert aggregate_day_position([r, c]) == Location.MIXED


def test_day_bounds_and_latest_out_lunch():
    events = [
        _ev(1, "09:00", "in", Location.OFFICE),
        _ev(2, "12:00", "out", Location.OFFICE, lunch=30),
        _ev(3, "13:00", "in", Location.OFFICE),
        _ev(4, "17:00", "out", Location.OFFICE, lunch=15),
    ]

    assert day_bounds(events) == (time(9, 0), time(17, 0))
    assert day_bounds([]) == (None, None)
    assert latest_out_lunch(events) == 15
    assert latest_out_lunch(events[:1]) is None
