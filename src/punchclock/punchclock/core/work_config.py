from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .constants import (
    DEFAULT_LUNCH_WINDOW,
    DEFAULT_MAX_LUNCH,
    DEFAULT_MIN_LUNCH,
    DEFAULT_POSITION,
    DEFAULT_WORK_DURATION,
)
from .enums import Location
from .exceptions import InvalidPositionError


def _as_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WorkConfig:
    """Work rules threaded explicitly into the services.

    `work_duration` and `lunch_window` stay raw strings: they are parsed
    fail-soft at calculation time so a bad value never blocks time entry.
    """

    work_duration: str = DEFAULT_WORK_DURATION
    lunch_window: str = DEFAULT_LUNCH_WINDOW
    min_lunch: int = DEFAULT_MIN_LUNCH
    max_lunch: int = DEFAULT_MAX_LUNCH
    default_position: Location = Location.OFFICE
    auto_lunch: bool = False
    surplus_strategy: str = "pairs"

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "WorkConfig":
        try:
            position = Location.from_code(str(settings.get("DEFAULT_POSITION") or DEFAULT_POSITION))
        except InvalidPositionError:
            position = Location.OFFICE
        if position == Location.MIXED:
            position = Location.OFFICE

        return cls(
            work_duration=str(settings.get("WORK_DURATION") or DEFAULT_WORK_DURATION),
            lunch_window=str(settings.get("LUNCH_WINDOW") or DEFAULT_LUNCH_WINDOW),
            min_lunch=max(_as_int(settings.get("MIN_LUNCH"), DEFAULT_MIN_LUNCH), 0),
            max_lunch=max(_as_int(settings.get("MAX_LUNCH"), DEFAULT_MAX_LUNCH), 0),
            default_position=position,
            auto_lunch=_as_bool(settings.get("AUTO_LUNCH")),
            surplus_strategy=str(settings.get("SURPLUS_STRATEGY") or "pairs").strip().lower(),
        )
