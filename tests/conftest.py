from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Callable, Optional, TypeVar

import pytest

from punchclock.core.work_config import WorkConfig
from punchclock.database.bootstrap import apply_schema
from punchclock.database.connection import DBConfig, DatabaseConnection
from punchclock.days.model import DayRecord
from punchclock.events.model import Event, LogEntry, sort_events
from punchclock.events.sql_event_repository import SqlEventStore

T = TypeVar("T")


class InMemoryEventStore:
    """EventStore fake; run_in_transaction restores a snapshot on any error."""

    def __init__(self):
        self.events: dict[int, Event] = {}
        self.days: dict[date, DayRecord] = {}
        self.log: list[LogEntry] = []
        self._next_id = 1

    def load_events(self, day: date):
        return sort_events(e for e in self.events.values() if e.date == day)

    def load_events_between(self, start: date, end: date):
        items = [e for e in self.events.values() if start <= e.date <= end]
        return sorted(items, key=lambda e: (e.date, e.time, e.id))

    def list_dates(self):
        return sorted({e.date for e in self.events.values()})

    def insert_event(self, event: Event) -> int:
        event_id = self._next_id
        self._next_id += 1
        self.events[event_id] = replace(event, id=event_id)
        return event_id

    def update_event(self, event: Event) -> bool:
        if event.id not in self.events:
            return False
        self.events[event.id] = event
        return True

    def delete_event(self, event_id: int) -> bool:
        return self.events.pop(event_id, None) is not None

    def delete_events_for_date(self, day: date) -> int:
        doomed = [i for i, e in self.events.items() if e.date == day]
        for event_id in doomed:
            del self.events[event_id]
        return len(doomed)

    def set_pair(self, event_id: int, pair: int) -> None:
        self.events[event_id] = self.events[event_id].with_pair(pair)

    def get_day(self, day: date) -> Optional[DayRecord]:
        return self.days.get(day)

    def upsert_day(self, record: DayRecord) -> None:
        self.days[record.date] = record

    def delete_day(self, day: date) -> bool:
        return self.days.pop(day, None) is not None

    def append_log(self, *, operation: str, target: str, message: str) -> None:
        self.log.append(
            LogEntry(
                log_id=len(self.log) + 1,
                logged_at="2025-01-01T00:00:00",
                operation=operation,
                target=target,
                message=message,
            )
        )

    def list_log(self, limit: int):
        return list(reversed(self.log))[:limit]

    def run_in_transaction(self, fn: Callable[["InMemoryEventStore"], T]) -> T:
        snapshot = (dict(self.events), dict(self.days), list(self.log), self._next_id)
        try:
            return fn(self)
        except Exception:
            self.events, self.days, self.log, self._next_id = snapshot
            raise


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def work_config() -> WorkConfig:
    return WorkConfig(work_duration="8h", lunch_window="12:30-14:00", min_lunch=30, max_lunch=90)


@pytest.fixture
def sqlite_conn(tmp_path):
    conn = DatabaseConnection(DBConfig(url=f"sqlite:///{tmp_path / 'punchclock.sqlite'}"))
    apply_schema(conn)
    yield conn
    conn.dispose()


@pytest.fixture
def sql_store(sqlite_conn) -> SqlEventStore:
    return SqlEventStore(sqlite_conn)
