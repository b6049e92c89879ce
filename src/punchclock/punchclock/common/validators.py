from __future__ import annotations

from typing import Optional

from ..core.enums import Location
from ..core.exceptions import InvalidPositionError, InvalidTimeError


def require_lunch_minutes(value: Optional[int], field_name: str = "lunch") -> Optional[int]:
    if value is None:
        return None
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise InvalidTimeError(f"{field_name} must be a number of minutes") from None
    if minutes < 0:
        raise InvalidTimeError(f"{field_name} cannot be negative")
    return minutes


def require_punch_location(code: Optional[str]) -> Optional[Location]:
    """Parse a location for a punch; the aggregate code is never user-entered."""
    if code is None or not str(code).strip():
        return None
    location = Location.from_code(str(code))
    if location == Location.MIXED:
        raise InvalidPositionError("Position 'M' (Mixed) is derived and cannot be set on a punch")
    return location
