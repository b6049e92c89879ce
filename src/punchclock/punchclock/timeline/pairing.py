"""Pair assignment: group one day's punches into logical work sessions.

Two variants share one chronological scan:

* lenient (listing, export, pair lookup): FIFO matching, never fails.
  Every IN opens a new pair; an OUT closes the oldest still-open IN.
  An OUT with nothing open becomes its own unmatched pair.
* strict (after a mutation, before commit): IN and OUT must alternate.
  A second IN while one is open, or an OUT with nothing open, raises
  InvalidTimeError and the caller's transaction is rolled back.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_date, format_hhmm
from ..core.enums import PairingMode
from ..core.exceptions import InvalidPairError, InvalidTimeError
from ..events.model import Event, sort_events


@dataclass(frozen=True)
class PairedEvent:
    event: Event
    unmatched: bool

    @property
    def pair(self) -> int:
        return self.event.pair


@dataclass(frozen=True)
class LogicalPair:
    """One pair as stored: either side may be missing."""

    number: int
    in_event: Optional[Event]
    out_event: Optional[Event]

    @property
    def events(self) -> list[Event]:
        return [e for e in (self.in_event, self.out_event) if e is not None]


def _assign_lenient(ordered: Sequence[Event]) -> list[PairedEvent]:
    next_pair = 1
    open_ins: deque[int] = deque()
    pairs: list[int] = [0] * len(ordered)
    unmatched: list[bool] = [False] * len(ordered)

    for idx, ev in enumerate(ordered):
        if ev.is_in:
            pairs[idx] = next_pair
            unmatched[idx] = True
            open_ins.append(idx)
            next_pair += 1
        elif open_ins:
            in_idx = open_ins.popleft()
            pairs[idx] = pairs[in_idx]
            unmatched[in_idx] = False
            unmatched[idx] = False
        else:
            pairs[idx] = next_pair
            unmatched[idx] = True
            next_pair += 1

    return [
        PairedEvent(event=ev.with_pair(pairs[idx]), unmatched=unmatched[idx])
        for idx, ev in enumerate(ordered)
    ]


def _assign_strict(ordered: Sequence[Event]) -> list[PairedEvent]:
    current = 1
    open_in: Optional[int] = None
    out: list[PairedEvent] = []

    for ev in ordered:
        day = format_date(ev.date)
        if ev.is_in:
            if open_in is not None:
                raise InvalidTimeError(
                    f"Invalid sequence on {day}: found IN at {format_hhmm(ev.time)} "
                    f"but pair {current} has no OUT"
                )
            open_in = len(out)
            out.append(PairedEvent(event=ev.with_pair(current), unmatched=True))
        else:
            if open_in is None:
                raise InvalidTimeError(
                    f"Invalid sequence on {day}: found OUT at {format_hhmm(ev.time)} without matching IN"
                )
            out[open_in] = PairedEvent(event=out[open_in].event, unmatched=False)
            out.append(PairedEvent(event=ev.with_pair(current), unmatched=False))
            open_in = None
            current += 1

    # A trailing open IN is an ongoing session, not an error.
    return out


def assign_pairs(events: Iterable[Event], mode: PairingMode = PairingMode.LENIENT) -> list[PairedEvent]:
    """Annotate one date's events with pair numbers, in chronological order."""
    ordered = sort_events(events)
    if mode == PairingMode.STRICT:
        return _assign_strict(ordered)
    return _assign_lenient(ordered)


def assign_pairs_strict(events: Iterable[Event]) -> list[PairedEvent]:
    return assign_pairs(events, PairingMode.STRICT)


def logical_pairs(events: Iterable[Event]) -> list[LogicalPair]:
    """Group lenient pair assignments into numbered pairs (1-based)."""
    grouped: dict[int, list[Event]] = {}
    for paired in assign_pairs(events, PairingMode.LENIENT):
        grouped.setdefault(paired.pair, []).append(paired.event)

    result = []
    for number in sorted(grouped):
        members = grouped[number]
        result.append(
            LogicalPair(
                number=number,
                in_event=next((e for e in members if e.is_in), None),
                out_event=next((e for e in members if e.is_out), None),
            )
        )
    return result


def pair_by_index(events: Iterable[Event], index: int) -> LogicalPair:
    pairs = logical_pairs(events)
    if index < 1 or index > len(pairs):
        raise InvalidPairError(index)
    return pairs[index - 1]
