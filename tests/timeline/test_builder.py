from __future__ import annotations

from datetime import date, time
from typing import Optional

from punchclock.common.datetime_utils import parse_hhmm
from punchclock.core.enums import EventKind, Location
from punchclock.events.model import Event
from punchclock.timeline.builder import build_timeline

D = date(2025, 1, 2)


def _ev(event_id: int, hhmm: str, kind: str, lunch: Optional[int] = None) -> Event:
    return Event(
        id=event_id,
        date=D,
        time=parse_hhmm(hhmm),
        kind=EventKind(kind),
        location=Location.REMOTE,
        lunch_minutes=lunch,
    )


def test_single_pair_duration():
    tl = build_timeline([_ev(2, "17:00", "out"), _ev(1, "09:00", "in")])

    assert len(tl.pairs) == 1
    assert tl.pairs[0].duration_minutes == 480
    assert tl.pairs[0].location == Location.REMOTE
    assert tl.total_worked_minutes == 480


def test_out_lunch_is_subtracted():
    tl = build_timeline([_ev(1, "09:00", "in"), _ev(2, "17:00", "out", lunch=45)])

    assert tl.pairs[0].lunch_minutes == 45
    assert tl.pairs[0].duration_minutes == 435


def test_duration_never_negative():
    short = build_timeline([_ev(1, "12:00", "in"), _ev(2, "12:30", "out", lunch=60)])
    overnight = build_timeline([_ev(1, "22:00", "in"), _ev(2, "06:00", "out")])

    assert short.pairs[0].duration_minutes == 0
    assert overnight.pairs[0].duration_minutes == 0


def test_open_pair_and_stray_out():
    tl = build_timeline([_ev(1, "08:00", "out"), _ev(2, "09:00", "in")])

    assert len(tl.events) == 2
    assert len(tl.pairs) == 1
    assert tl.pairs[0].is_open
    assert tl.pairs[0].duration_minutes == 0


def test_gaps_between_closed_pairs():
    tl = build_timeline(
        [_ev(1, "09:00", "in"), _ev(2, "12:00", "out"), _ev(3, "13:00", "in"), _ev(4, "17:00", "out")]
    )

    assert [(g.start, g.end, g.duration_minutes) for g in tl.gaps] == [(time(12, 0), time(13, 0), 60)]
    assert tl.total_worked_minutes == 420
    assert tl.first_in.id == 1
    assert tl.last_out.id == 4


def test_no_gap_after_open_pair():
    tl = build_timeline([_ev(1, "09:00", "in"), _ev(2, "10:00", "in"), _ev(3, "11:00", "out")])

    assert [p.is_open for p in tl.pairs] == [True, False]
    assert tl.gaps == []
    assert tl.total_worked_minutes == 60


def test_empty_day():
    tl = build_timeline([])

    assert tl.pairs == [] and tl.total_worked_minutes == 0
    assert tl.first_in is None and tl.last_out is None
