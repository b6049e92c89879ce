from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Iterable, Optional

from ..common.datetime_utils import minutes_between
from ..core.enums import Location
from ..events.model import Event, sort_events


@dataclass(frozen=True)
class Pair:
    """A work session rebuilt for display; `out_event` is None while open."""

    in_event: Event
    out_event: Optional[Event]
    duration_minutes: int
    lunch_minutes: int
    location: Location

    @property
    def is_open(self) -> bool:
        return self.out_event is None


@dataclass(frozen=True)
class Gap:
    start: time
    end: time
    duration_minutes: int
    is_work_gap: bool = False


@dataclass(frozen=True)
class Timeline:
    events: list[Event] = field(default_factory=list)
    pairs: list[Pair] = field(default_factory=list)
    gaps: list[Gap] = field(default_factory=list)
    total_worked_minutes: int = 0

    @property
    def first_in(self) -> Optional[Event]:
        return self.pairs[0].in_event if self.pairs else None

    @property
    def last_out(self) -> Optional[Event]:
        closed = [p.out_event for p in self.pairs if p.out_event is not None]
        return closed[-1] if closed else None


def pair_lunch(in_event: Event, out_event: Optional[Event]) -> int:
    """Lunch recorded on the IN wins; otherwise the OUT carries it."""
    if in_event.lunch:
        return in_event.lunch
    return out_event.lunch if out_event is not None else 0


def build_timeline(events: Iterable[Event]) -> Timeline:
    """Rebuild sessions from raw punches, ignoring any stored `pair` values.

    An IN immediately followed by an OUT is a closed pair, an IN without a
    following OUT is an open pair worth 0 minutes, a stray OUT is skipped.
    """
    ordered = sort_events(events)
    if not ordered:
        return Timeline()

    pairs: list[Pair] = []
    i = 0
    while i < len(ordered):
        ev = ordered[i]
        if ev.is_in:
            nxt = ordered[i + 1] if i + 1 < len(ordered) else None
            if nxt is not None and nxt.is_out:
                lunch = pair_lunch(ev, nxt)
                # Overnight punches (OUT earlier than IN) are not wrapped.
                duration = max(minutes_between(ev.time, nxt.time) - lunch, 0)
                pairs.append(Pair(ev, nxt, duration, lunch, ev.location))
                i += 2
                continue
            pairs.append(Pair(ev, None, 0, pair_lunch(ev, None), ev.location))
        i += 1

    gaps: list[Gap] = []
    for prev, nxt in zip(pairs, pairs[1:]):
        if prev.out_event is None:
            continue
        minutes = minutes_between(prev.out_event.time, nxt.in_event.time)
        if minutes > 0:
            gaps.append(Gap(start=prev.out_event.time, end=nxt.in_event.time, duration_minutes=minutes))

    return Timeline(
        events=ordered,
        pairs=pairs,
        gaps=gaps,
        total_worked_minutes=sum(p.duration_minutes for p in pairs),
    )
