from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from itertools import groupby
from typing import Any, Dict, List, Optional

import pandas as pd

from ..common.datetime_utils import format_date, format_hhmm, format_minutes
from ..core.enums import Location
from ..core.exceptions import ValidationError
from ..days.aggregator import aggregate_day_position
from ..events.repository import EventStore
from ..summary.service import SummaryService
from ..timeline.pairing import assign_pairs

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"

    @classmethod
    def from_name(cls, name: str) -> "ExportFormat":
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Unsupported export format: {name!r}") from None


class ExportKind(str, Enum):
    EVENTS = "events"
    DAYS = "days"

    @classmethod
    def from_name(cls, name: str) -> "ExportKind":
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            raise ValidationError(f"Unsupported export kind: {name!r}") from None


EVENT_FIELDS = ["date", "time", "kind", "position", "lunch", "pair", "unmatched", "source", "meta"]
DAY_FIELDS = [
    "date",
    "position",
    "first_in",
    "last_out",
    "pairs",
    "lunch",
    "worked",
    "expected",
    "surplus",
    "expected_exit",
]

_MIMETYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass(frozen=True)
class ExportResult:
    content: bytes
    mimetype: str
    filename: str


def to_csv(rows: List[Dict[str, Any]], fieldnames: List[str]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=fieldnames)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    # BOM so spreadsheet apps detect UTF-8.
    return out.getvalue().encode("utf-8-sig")


def to_json(rows: List[Dict[str, Any]]) -> bytes:
    return json.dumps(rows, ensure_ascii=False, indent=2).encode("utf-8")


def to_xlsx(rows: List[Dict[str, Any]], fieldnames: List[str], *, sheet_name: str) -> bytes:
    df = pd.DataFrame(rows, columns=fieldnames)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


class ExportService:
    """Flat rows for a date range, encoded as CSV, JSON or XLSX."""

    def __init__(self, store: EventStore, summaries: SummaryService):
        self._store = store
        self._summaries = summaries

    def event_rows(self, start: date, end: date, *, location: Optional[Location] = None) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        events = self._store.load_events_between(start, end)
        for _, items in groupby(events, key=lambda e: e.date):
            day_events = list(items)
            # Same filter as the day export: the day's aggregated position.
            if location is not None and aggregate_day_position(day_events) != location:
                continue
            for paired in assign_pairs(day_events):
                ev = paired.event
                rows.append(
                    {
                        "date": format_date(ev.date),
                        "time": format_hhmm(ev.time),
                        "kind": ev.kind.value,
                        "position": ev.location.value,
                        "lunch": ev.lunch,
                        "pair": paired.pair,
                        "unmatched": paired.unmatched,
                        "source": ev.source,
                        "meta": ev.meta,
                    }
                )
        return rows

    def day_rows(self, start: date, end: date, *, location: Optional[Location] = None) -> List[Dict[str, Any]]:
        period = self._summaries.period_summary(start, end, location=location)
        rows: List[Dict[str, Any]] = []
        for d in period.days:
            first_in = d.timeline.first_in
            last_out = d.timeline.last_out
            rows.append(
                {
                    "date": format_date(d.date),
                    "position": d.position.value if d.position else "",
                    "first_in": format_hhmm(first_in.time) if first_in else "",
                    "last_out": format_hhmm(last_out.time) if last_out else "",
                    "pairs": len(d.timeline.pairs),
                    "lunch": d.lunch_minutes,
                    "worked": format_minutes(d.worked_minutes),
                    "expected": format_minutes(d.expected_minutes),
                    "surplus": format_minutes(d.surplus_minutes),
                    "expected_exit": d.expected_exit.strftime("%Y-%m-%d %H:%M") if d.expected_exit else "",
                }
            )
        return rows

    def export(
        self,
        start: date,
        end: date,
        *,
        fmt: ExportFormat = ExportFormat.CSV,
        kind: ExportKind = ExportKind.EVENTS,
        location: Optional[Location] = None,
    ) -> ExportResult:
        if kind == ExportKind.DAYS:
            rows, fields = self.day_rows(start, end, location=location), DAY_FIELDS
        else:
            rows, fields = self.event_rows(start, end, location=location), EVENT_FIELDS

        if fmt == ExportFormat.JSON:
            content = to_json(rows)
        elif fmt == ExportFormat.XLSX:
            content = to_xlsx(rows, fields, sheet_name=kind.value)
        else:
            content = to_csv(rows, fields)

        filename = f"punchclock_{kind.value}_{format_date(start)}_{format_date(end)}.{fmt.value}"
        logger.info("exported %d %s rows as %s", len(rows), kind.value, fmt.value)
        return ExportResult(content=content, mimetype=_MIMETYPES[fmt], filename=filename)
