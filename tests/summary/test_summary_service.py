from __future__ import annotations

from dataclasses import replace
from datetime import date, time

from punchclock.core.enums import Location
from punchclock.punches.service import PunchService
from punchclock.summary.service import SummaryService


def test_day_summary(store, work_config):
    punches = PunchService(store, work_config)
    punches.apply_add(date(2025, 1, 2), start=time(9, 0), end=time(17, 0))

    summary = SummaryService(store, work_config).day_summary(date(2025, 1, 2))

    assert summary.expected_minutes == 510
    assert summary.surplus_minutes == -30
    assert summary.worked_minutes == 480
    assert summary.lunch_minutes == 30
    assert summary.position == Location.OFFICE
    assert [p.pair for p in summary.paired_events] == [1, 1]


def test_period_summary_totals_and_location_filter(store, work_config):
    punches = PunchService(store, work_config)
    punches.apply_add(date(2025, 1, 2), start=time(9, 0), end=time(17, 0))
    punches.apply_add(date(2025, 1, 3), position=Location.REMOTE, start=time(9, 0), end=time(18, 0))
    punches.apply_add(date(2025, 2, 1), start=time(9, 0), end=time(17, 0))

    summaries = SummaryService(store, work_config)
    january = summaries.period_summary(date(2025, 1, 1), date(2025, 1, 31))
    remote = summaries.period_summary(date(2025, 1, 1), date(2025, 1, 31), location=Location.REMOTE)

    assert [d.date for d in january.days] == [date(2025, 1, 2), date(2025, 1, 3)]
    assert january.total_worked_minutes == 480 + 540
    assert january.total_expected_minutes == 510 + 510
    assert january.total_surplus_minutes == -30 + 30
    assert [d.date for d in remote.days] == [date(2025, 1, 3)]


def test_span_strategy_from_config(store, work_config):
    config = replace(work_config, surplus_strategy="span")
    punches = PunchService(store, config)
    punches.apply_add(date(2025, 1, 2), start=time(9, 0), end=time(12, 0))
    punches.apply_add(date(2025, 1, 2), start=time(13, 0), end=time(17, 0))

    summary = SummaryService(store, config).day_summary(date(2025, 1, 2))

    assert summary.surplus_minutes == 480 - 510
