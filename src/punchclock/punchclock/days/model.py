from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import Location


@dataclass(frozen=True)
class DayRecord:
    """Denormalised per-day aggregate kept in `work_sessions`.

    Derived from the day's events after every mutation; never a source of truth.
    """

    date: date
    position: Location
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    lunch_minutes: int = 0
