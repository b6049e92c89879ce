from __future__ import annotations

import calendar
from datetime import date, datetime, time

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import InvalidDateError, InvalidTimeError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateError(f"Invalid date format: {value!r}") from None


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (24h) string into time."""
    try:
        return datetime.strptime((value or "").strip(), TIME_FORMAT).time()
    except ValueError:
        raise InvalidTimeError(f"Invalid time format: {value!r}") from None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_hhmm(value: time | None) -> str:
    return value.strftime(TIME_FORMAT) if value else ""


def to_minutes(value: time) -> int:
    """Minutes since midnight, seconds are ignored."""
    return value.hour * 60 + value.minute


def minutes_between(start: time, end: time) -> int:
    """Signed wall-clock difference in minutes (no midnight wrap)."""
    return to_minutes(end) - to_minutes(start)


def format_minutes(minutes: int) -> str:
    """Render a signed minute count as [-]HH:MM."""
    sign = "-" if minutes < 0 else ""
    minutes = abs(int(minutes))
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def _year(text: str) -> int:
    if len(text) != 4 or not text.isdigit():
        raise InvalidDateError(f"Invalid year: {text!r}")
    return int(text)


def _month_bounds(text: str) -> tuple[date, date]:
    year = _year(text[0:4])
    if text[4] != "-" or not text[5:7].isdigit():
        raise InvalidDateError(f"Invalid month: {text!r}")
    month = int(text[5:7])
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Invalid month: {text!r}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def _bounds(text: str) -> tuple[date, date]:
    if len(text) == 4:
        year = _year(text)
        return date(year, 1, 1), date(year, 12, 31)
    if len(text) == 7:
        return _month_bounds(text)
    if len(text) == 10:
        day = parse_iso_date(text)
        return day, day
    raise InvalidDateError(f"Unsupported range format: {text!r}")


def parse_period(value: str) -> tuple[date, date]:
    """Resolve a period expression into an inclusive (start, end) date range.

    Supported: YYYY, YYYY-MM, YYYY-MM-DD and START:END where both sides use
    the same one of those forms.
    """
    text = (value or "").strip()
    if ":" in text:
        start_raw, end_raw = (part.strip() for part in text.split(":", 1))
        if len(start_raw) != len(end_raw):
            raise InvalidDateError("Range start and end must have the same format")
        start, _ = _bounds(start_raw)
        _, end = _bounds(end_raw)
    else:
        start, end = _bounds(text)

    if end < start:
        raise InvalidDateError(f"Range end before start: {value!r}")
    return start, end
