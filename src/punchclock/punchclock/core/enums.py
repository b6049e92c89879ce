from __future__ import annotations

from enum import Enum

from .exceptions import InvalidPositionError


class EventKind(str, Enum):
    """Punch direction stored in the `events.kind` column."""

    IN = "in"
    OUT = "out"


class Location(str, Enum):
    """Work location code stored in the `position` columns."""

    OFFICE = "O"
    REMOTE = "R"
    HOLIDAY = "H"
    ON_SITE = "C"
    MIXED = "M"

    @property
    def label(self) -> str:
        return {
            Location.OFFICE: "Office",
            Location.REMOTE: "Remote",
            Location.HOLIDAY: "Holiday",
            Location.ON_SITE: "On-site (Client)",
            Location.MIXED: "Mixed",
        }[self]

    @classmethod
    def from_code(cls, code: str) -> "Location":
        """Parse a user supplied code, case-insensitive."""
        value = (code or "").strip().upper()
        try:
            return cls(value)
        except ValueError:
            raise InvalidPositionError(f"Invalid position code: {code!r}") from None


class PairingMode(str, Enum):
    """Which pair assignment variant a call site runs.

    LENIENT never fails and keeps orphans as unmatched pairs (listing, export).
    STRICT enforces IN/OUT alternation and rejects the sequence (mutations).
    """

    LENIENT = "lenient"
    STRICT = "strict"
