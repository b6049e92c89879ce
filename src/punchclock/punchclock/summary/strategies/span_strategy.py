from __future__ import annotations

from ...common.datetime_utils import minutes_between
from ...timeline.builder import Timeline
from .base import SurplusStrategy


class SpanStrategy(SurplusStrategy):
    """First IN to last OUT, minus recorded lunch, not below 0.

    Counts idle gaps between pairs as worked; equals PairSumStrategy on
    single-pair days.
    """

    name = "span"

    def worked_minutes(self, timeline: Timeline) -> int:
        first_in = timeline.first_in
        last_out = timeline.last_out
        if first_in is None or last_out is None:
            return 0
        lunch = sum(p.lunch_minutes for p in timeline.pairs if not p.is_open)
        return max(minutes_between(first_in.time, last_out.time) - lunch, 0)
