"""Expected minutes, expected exit time and surplus for one day.

Every input here is defaulted rather than rejected: a malformed work
duration or lunch window only changes derived numbers, it must never
block listing or time entry.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import to_minutes
from ..core.constants import DEFAULT_LUNCH_WINDOW, DEFAULT_WORK_MINUTES
from ..core.work_config import WorkConfig
from ..timeline.builder import Timeline
from .strategies.base import SurplusStrategy
from .strategies.factory import SurplusStrategyFactory


def parse_work_duration(value: Optional[str]) -> int:
    """Parse "8h", "7h 36m", "7h36", "07:36" or a bare hour count into minutes."""
    s = (value or "").strip().lower()
    if not s:
        return DEFAULT_WORK_MINUTES

    if "h" in s:
        h_part, rest = s.split("h", 1)
        hours = int(h_part.strip()) if h_part.strip().isdigit() else 8
        rest = rest.strip()
        if "m" in rest:
            rest = rest.split("m", 1)[0]
        minutes = int(rest.strip()) if rest.strip().isdigit() else 0
        return hours * 60 + minutes

    if ":" in s:
        h_part, m_part = s.split(":", 1)
        hours = int(h_part.strip()) if h_part.strip().isdigit() else 8
        minutes = int(m_part.strip()) if m_part.strip().isdigit() else 0
        return hours * 60 + minutes

    if s.isdigit():
        return int(s) * 60

    return DEFAULT_WORK_MINUTES


def _parse_clock(text: str) -> Optional[time]:
    try:
        return datetime.strptime(text.strip(), "%H:%M").time()
    except ValueError:
        return None


def parse_lunch_window(value: Optional[str]) -> tuple[time, time]:
    """Parse "HH:MM-HH:MM"; anything unusable falls back to the default window."""
    default_start, default_end = (
        _parse_clock(part) for part in DEFAULT_LUNCH_WINDOW.split("-", 1)
    )
    if not value or "-" not in value:
        return default_start, default_end

    start_raw, end_raw = value.split("-", 1)
    start, end = _parse_clock(start_raw), _parse_clock(end_raw)
    if start is None or end is None or end < start:
        return default_start, default_end
    return start, end


def effective_lunch_minutes(timeline: Timeline, config: WorkConfig) -> int:
    """Lunch of the first pair; inferred as `min_lunch` when none was recorded
    and the day started at or before the end of the lunch window."""
    if not timeline.pairs:
        return 0

    first = timeline.pairs[0]
    if first.lunch_minutes > 0:
        return first.lunch_minutes

    _, window_end = parse_lunch_window(config.lunch_window)
    if first.in_event.time <= window_end:
        return config.min_lunch
    return 0


def compute_expected_minutes(timeline: Timeline, config: WorkConfig) -> int:
    if not timeline.pairs:
        return 0
    return parse_work_duration(config.work_duration) + effective_lunch_minutes(timeline, config)


def compute_expected_and_surplus(
    timeline: Timeline,
    config: WorkConfig,
    strategy: Optional[SurplusStrategy] = None,
) -> tuple[int, int]:
    """Return (expected_minutes, surplus_minutes) for one day's timeline."""
    if not timeline.pairs:
        return 0, 0

    strategy = strategy or SurplusStrategyFactory().for_name(config.surplus_strategy)
    expected = compute_expected_minutes(timeline, config)
    return expected, strategy.worked_minutes(timeline) - expected


def expected_exit(day: date, time_in: time, work_minutes: int, lunch_minutes: int) -> datetime:
    """Clock time at which the quota plus lunch is met; rolls over past midnight."""
    total = to_minutes(time_in) + int(work_minutes) + int(lunch_minutes)
    days, minute_of_day = divmod(total, 24 * 60)
    return datetime.combine(day + timedelta(days=days), time(minute_of_day // 60, minute_of_day % 60))


def expected_exit_for(timeline: Timeline, config: WorkConfig) -> Optional[datetime]:
    first_in = timeline.first_in
    if first_in is None:
        return None
    return expected_exit(
        first_in.date,
        first_in.time,
        parse_work_duration(config.work_duration),
        effective_lunch_minutes(timeline, config),
    )
