from __future__ import annotations

from ...timeline.builder import Timeline
from .base import SurplusStrategy


class PairSumStrategy(SurplusStrategy):
    """Default rule: sum of closed pair durations (each already net of its lunch)."""

    name = "pairs"

    def worked_minutes(self, timeline: Timeline) -> int:
        return timeline.total_worked_minutes
