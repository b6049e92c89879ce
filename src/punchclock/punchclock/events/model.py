from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time
from typing import Optional

from ..core.constants import DEFAULT_SOURCE
from ..core.enums import EventKind, Location


@dataclass(frozen=True)
class Event:
    """Domain entity: a single punch.

    `pair` is a projection recomputed from the day's (time, kind) sequence;
    callers never set it directly, the store writes it back after pairing.
    """

    id: int
    date: date
    time: time
    kind: EventKind
    location: Location
    lunch_minutes: Optional[int] = None
    work_gap: bool = False
    pair: int = 0
    source: str = DEFAULT_SOURCE
    meta: str = ""
    created_at: str = ""

    @property
    def is_in(self) -> bool:
        return self.kind == EventKind.IN

    @property
    def is_out(self) -> bool:
        return self.kind == EventKind.OUT

    @property
    def lunch(self) -> int:
        return int(self.lunch_minutes or 0)

    @property
    def is_persisted(self) -> bool:
        return self.id > 0

    def sort_key(self) -> tuple[time, int]:
        return (self.time, self.id)

    def with_pair(self, pair: int) -> "Event":
        return replace(self, pair=pair)


@dataclass(frozen=True)
class LogEntry:
    """Read-model for the audit trail."""

    log_id: int
    logged_at: str
    operation: str
    target: str
    message: str


def sort_events(events) -> list[Event]:
    """Chronological order; ties keep store insertion order (id), then input order."""
    return sorted(events, key=Event.sort_key)
