from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence, TypeVar

from ..days.model import DayRecord
from .model import Event, LogEntry

T = TypeVar("T")


class EventStore(Protocol):
    """Event Store Adapter: the only owner of persisted rows."""

    def load_events(self, day: date) -> Sequence[Event]:
        """Events of one date, ordered by (time, id)."""
        raise NotImplementedError

    def load_events_between(self, start: date, end: date) -> Sequence[Event]:
        raise NotImplementedError

    def list_dates(self) -> Sequence[date]:
        raise NotImplementedError

    def insert_event(self, event: Event) -> int:
        raise NotImplementedError

    def update_event(self, event: Event) -> bool:
        raise NotImplementedError

    def delete_event(self, event_id: int) -> bool:
        raise NotImplementedError

    def delete_events_for_date(self, day: date) -> int:
        raise NotImplementedError

    def set_pair(self, event_id: int, pair: int) -> None:
        raise NotImplementedError

    # -------- Day aggregate (work_sessions) --------
    def get_day(self, day: date) -> Optional[DayRecord]:
        raise NotImplementedError

    def upsert_day(self, record: DayRecord) -> None:
        raise NotImplementedError

    def delete_day(self, day: date) -> bool:
        raise NotImplementedError

    # -------- Audit log --------
    def append_log(self, *, operation: str, target: str, message: str) -> None:
        raise NotImplementedError

    def list_log(self, limit: int) -> Sequence[LogEntry]:
        raise NotImplementedError

    def run_in_transaction(self, fn: Callable[["EventStore"], T]) -> T:
        """Run `fn` against a store bound to a single transaction.

        Commits when `fn` returns, rolls back everything when it raises.
        """
        raise NotImplementedError
