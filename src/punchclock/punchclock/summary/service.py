from __future__ import annotations

from datetime import date
from itertools import groupby
from typing import Optional, Sequence

from ..core.enums import Location
from ..core.work_config import WorkConfig
from ..days.aggregator import aggregate_day_position
from ..events.model import Event
from ..events.repository import EventStore
from ..timeline.builder import build_timeline
from ..timeline.pairing import assign_pairs
from .expected import compute_expected_and_surplus, effective_lunch_minutes, expected_exit_for
from .gaps import analyze_gaps
from .model import DaySummary, PeriodSummary
from .strategies.factory import SurplusStrategyFactory


class SummaryService:
    """Read-only listing: every call rebuilds pairs and timelines from stored events."""

    def __init__(
        self,
        store: EventStore,
        config: WorkConfig,
        *,
        strategy_factory: Optional[SurplusStrategyFactory] = None,
    ):
        self._store = store
        self._config = config
        self._strategy = (strategy_factory or SurplusStrategyFactory()).for_name(config.surplus_strategy)

    def summarize(self, day: date, events: Sequence[Event]) -> DaySummary:
        timeline = build_timeline(events)
        expected, surplus = compute_expected_and_surplus(timeline, self._config, self._strategy)
        return DaySummary(
            date=day,
            timeline=timeline,
            expected_minutes=expected,
            surplus_minutes=surplus,
            gap_info=analyze_gaps(timeline),
            lunch_minutes=effective_lunch_minutes(timeline, self._config),
            expected_exit=expected_exit_for(timeline, self._config),
            position=aggregate_day_position(events),
            paired_events=assign_pairs(events),
        )

    def day_summary(self, day: date) -> DaySummary:
        return self.summarize(day, self._store.load_events(day))

    def period_summary(self, start: date, end: date, *, location: Optional[Location] = None) -> PeriodSummary:
        events = self._store.load_events_between(start, end)
        days: list[DaySummary] = []
        for day, items in groupby(events, key=lambda e: e.date):
            summary = self.summarize(day, list(items))
            if location is not None and summary.position != location:
                continue
            days.append(summary)
        return PeriodSummary(start=start, end=end, days=days)
