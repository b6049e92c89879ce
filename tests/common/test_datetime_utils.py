from __future__ import annotations

from datetime import date, time

import pytest

from punchclock.common.datetime_utils import format_minutes, parse_hhmm, parse_iso_date, parse_period
from punchclock.common.validators import require_lunch_minutes, require_punch_location
from punchclock.core.enums import Location
from punchclock.core.exceptions import InvalidDateError, InvalidPositionError, InvalidTimeError


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024", (date(2024, 1, 1), date(2024, 12, 31))),
        ("2024-02", (date(2024, 2, 1), date(2024, 2, 29))),
        ("2025-01-02", (date(2025, 1, 2), date(2025, 1, 2))),
        ("2024:2025", (date(2024, 1, 1), date(2025, 12, 31))),
        ("2025-01:2025-03", (date(2025, 1, 1), date(2025, 3, 31))),
        ("2025-01-02:2025-01-05", (date(2025, 1, 2), date(2025, 1, 5))),
    ],
)
def test_parse_period(value, expected):
    assert parse_period(value) == expected


@pytest.mark.parametrize("value", ["", "25", "2025-13", "2025-01:2025", "2025-02:2025-01", "2025/01/02"])
def test_parse_period_rejects(value):
    with pytest.raises(InvalidDateError):
        parse_period(value)


def test_parse_date_and_time():
    assert parse_iso_date(" 2025-01-02 ") == date(2025, 1, 2)
    assert parse_hhmm("07:05") == time(7, 5)
    with pytest.raises(InvalidDateError):
        parse_iso_date("02/01/2025")
    with pytest.raises(InvalidTimeError):
        parse_hhmm("25:00")


def test_format_minutes():
    assert format_minutes(0) == "00:00"
    assert format_minutes(456) == "07:36"
    assert format_minutes(-30) == "-00:30"


def test_validators():
    assert require_lunch_minutes(None) is None
    assert require_lunch_minutes("45") == 45
    with pytest.raises(InvalidTimeError):
        require_lunch_minutes(-1)
    with pytest.raises(InvalidTimeError):
        require_lunch_minutes("soon")

    assert require_punch_location(None) is None
    assert require_punch_location(" r ") == Location.REMOTE
    with pytest.raises(InvalidPositionError):
        require_punch_location("m")
