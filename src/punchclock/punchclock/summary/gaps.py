from __future__ import annotations

from dataclasses import dataclass

from ..timeline.builder import Timeline


@dataclass(frozen=True)
class GapInfo:
    total_gap_minutes: int = 0
    work_gap_minutes: int = 0
    non_work_gap_minutes: int = 0


def analyze_gaps(timeline: Timeline) -> GapInfo:
    """Split idle time between pairs by the informational `is_work_gap` flag."""
    total = sum(g.duration_minutes for g in timeline.gaps)
    work = sum(g.duration_minutes for g in timeline.gaps if g.is_work_gap)
    return GapInfo(total_gap_minutes=total, work_gap_minutes=work, non_work_gap_minutes=total - work)
