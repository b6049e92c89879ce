from __future__ import annotations

import io
import json
from datetime import date, time

import pandas as pd

from punchclock.core.enums import Location
from punchclock.export.service import DAY_FIELDS, EVENT_FIELDS, ExportFormat, ExportKind, ExportService
from punchclock.punches.service import PunchService
from punchclock.summary.service import SummaryService

JAN_START, JAN_END = date(2025, 1, 1), date(2025, 1, 31)


def _service(store, work_config) -> ExportService:
    punches = PunchService(store, work_config)
    punches.apply_add(date(2025, 1, 2), start=time(9, 0), end=time(17, 0))
    punches.apply_add(date(2025, 1, 3), position=Location.REMOTE, start=time(9, 0))
    return ExportService(store, SummaryService(store, work_config))


def test_event_rows_carry_pairing(store, work_config):
    rows = _service(store, work_config).event_rows(JAN_START, JAN_END)

    assert [(r["date"], r["time"], r["kind"], r["pair"], r["unmatched"]) for r in rows] == [
        ("2025-01-02", "09:00", "in", 1, False),
        ("2025-01-02", "17:00", "out", 1, False),
        ("2025-01-03", "09:00", "in", 1, True),
    ]


def test_day_rows(store, work_config):
    rows = _service(store, work_config).day_rows(JAN_START, JAN_END)

    assert rows[0]["worked"] == "08:00"
    assert rows[0]["surplus"] == "-00:30"
    assert rows[1]["position"] == "R"
    assert rows[1]["last_out"] == ""
    assert rows[1]["expected_exit"] == "2025-01-03 17:30"


def test_json_export(store, work_config):
    result = _service(store, work_config).export(JAN_START, JAN_END, fmt=ExportFormat.JSON, kind=ExportKind.DAYS)

    assert result.filename == "punchclock_days_2025-01-01_2025-01-31.json"
    assert [r["date"] for r in json.loads(result.content)] == ["2025-01-02", "2025-01-03"]


def test_xlsx_export_has_header_and_rows(store, work_config):
    svc = _service(store, work_config)

    events = svc.export(JAN_START, JAN_END, fmt=ExportFormat.XLSX, kind=ExportKind.EVENTS)
    days = svc.export(JAN_START, JAN_END, fmt=ExportFormat.XLSX, kind=ExportKind.DAYS)

    df = pd.read_excel(io.BytesIO(events.content), engine="openpyxl")
    assert list(df.columns) == EVENT_FIELDS
    assert len(df) == 3
    assert list(pd.read_excel(io.BytesIO(days.content), engine="openpyxl").columns) == DAY_FIELDS


def test_csv_export_of_empty_range(store, work_config):
    result = _service(store, work_config).export(date(2024, 1, 1), date(2024, 12, 31))

    assert result.mimetype == "text/csv"
    assert result.content.decode("utf-8-sig").strip() == ",".join(EVENT_FIELDS)


def test_event_export_filters_by_day_position(store, work_config):
    svc = _service(store, work_config)

    rows = svc.event_rows(JAN_START, JAN_END, location=Location.REMOTE)
    result = svc.export(JAN_START, JAN_END, fmt=ExportFormat.JSON, kind=ExportKind.EVENTS, location=Location.REMOTE)

    assert [(r["date"], r["kind"]) for r in rows] == [("2025-01-03", "in")]
    assert [r["date"] for r in json.loads(result.content)] == ["2025-01-03"]
    assert svc.event_rows(JAN_START, JAN_END, location=Location.HOLIDAY) == []
