from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import Location
from ..timeline.builder import Timeline
from ..timeline.pairing import PairedEvent
from .gaps import GapInfo


@dataclass(frozen=True)
class DaySummary:
    """Presentation-only view of one day, rebuilt on every read."""

    date: date
    timeline: Timeline
    expected_minutes: int
    surplus_minutes: int
    gap_info: GapInfo
    lunch_minutes: int = 0
    expected_exit: Optional[datetime] = None
    position: Optional[Location] = None
    paired_events: list[PairedEvent] = field(default_factory=list)

    @property
    def worked_minutes(self) -> int:
        return self.expected_minutes + self.surplus_minutes


@dataclass(frozen=True)
class PeriodSummary:
    start: date
    end: date
    days: list[DaySummary]

    @property
    def total_worked_minutes(self) -> int:
        return sum(d.worked_minutes for d in self.days)

    @property
    def total_expected_minutes(self) -> int:
        return sum(d.expected_minutes for d in self.days)

    @property
    def total_surplus_minutes(self) -> int:
        return sum(d.surplus_minutes for d in self.days)
