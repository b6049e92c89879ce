from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ..common.datetime_utils import format_date, format_hhmm, now_local
from ..core.enums import EventKind, Location
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, normalize_sql_date, normalize_sql_time
from ..days.model import DayRecord
from .model import Event, LogEntry
from .repository import EventStore

T = TypeVar("T")

_EVENT_COLUMNS = "id, date, time, kind, position, lunch_break, work_gap, pair, source, meta, created_at"
_DAY_COLUMNS = "date, position, start_time, end_time, lunch_break"


def _to_event(r: Dict[str, Any]) -> Event:
    return Event(
        id=int(r["id"]),
        date=normalize_sql_date(r["date"]),
        time=normalize_sql_time(r["time"]),
        kind=EventKind(r["kind"]),
        location=Location(r["position"]),
        lunch_minutes=int(r.get("lunch_break") or 0),
        work_gap=bool(r.get("work_gap")),
        pair=int(r.get("pair") or 0),
        source=r.get("source") or "",
        meta=r.get("meta") or "",
        created_at=r.get("created_at") or "",
    )


def _to_day(r: Dict[str, Any]) -> DayRecord:
    return DayRecord(
        date=normalize_sql_date(r["date"]),
        position=Location(r["position"]),
        start_time=normalize_sql_time(r.get("start_time")),
        end_time=normalize_sql_time(r.get("end_time")),
        lunch_minutes=int(r.get("lunch_break") or 0),
    )


def _event_params(event: Event) -> Dict[str, Any]:
    return {
        "date": format_date(event.date),
        "time": format_hhmm(event.time),
        "kind": event.kind.value,
        "position": event.location.value,
        "lunch_break": event.lunch,
        "work_gap": 1 if event.work_gap else 0,
        "pair": int(event.pair),
        "source": event.source,
        "meta": event.meta,
        "created_at": event.created_at or now_local().isoformat(timespec="seconds"),
    }


class SqlEventStore(EventStore):
    def __init__(self, conn_factory: DatabaseConnection, *, bound: Optional[Connection] = None):
        self._conn_factory = conn_factory
        self._bound = bound

    @contextmanager
    def _cursor(self, *, read_only: bool = False) -> Iterator[Connection]:
        # Inside run_in_transaction every call shares the caller's transaction.
        if self._bound is not None:
            yield self._bound
            return
        with db_cursor(self._conn_factory, read_only=read_only) as conn:
            yield conn

    def run_in_transaction(self, fn: Callable[[EventStore], T]) -> T:
        if self._bound is not None:
            return fn(self)
        with db_cursor(self._conn_factory) as conn:
            return fn(SqlEventStore(self._conn_factory, bound=conn))

    # -------- Events --------
    def load_events(self, day: date) -> Sequence[Event]:
        with self._cursor(read_only=True) as conn:
            result = conn.execute(
                text(
                    f"""
                    SELECT {_EVENT_COLUMNS}
                    FROM events
                    WHERE date = :date
                    ORDER BY time ASC, id ASC
                    """
                ),
                {"date": format_date(day)},
            )
            return [_to_event(r) for r in fetchall(result)]

    def load_events_between(self, start: date, end: date) -> Sequence[Event]:
        with self._cursor(read_only=True) as conn:
            result = conn.execute(
                text(
                    f"""
                    SELECT {_EVENT_COLUMNS}
                    FROM events
                    WHERE date BETWEEN :start AND :end
                    ORDER BY date ASC, time ASC, id ASC
                    """
                ),
                {"start": format_date(start), "end": format_date(end)},
            )
            return [_to_event(r) for r in fetchall(result)]

    def list_dates(self) -> Sequence[date]:
        with self._cursor(read_only=True) as conn:
            result = conn.execute(text("SELECT DISTINCT date FROM events ORDER BY date ASC"))
            return [normalize_sql_date(r["date"]) for r in fetchall(result)]

    def insert_event(self, event: Event) -> int:
        with self._cursor() as conn:
            result = conn.execute(
                text(
                    """
                    INSERT INTO events(date, time, kind, position, lunch_break, work_gap, pair, source, meta, created_at)
                    VALUES(:date, :time, :kind, :position, :lunch_break, :work_gap, :pair, :source, :meta, :created_at)
                    """
                ),
                _event_params(event),
            )
            return int(result.lastrowid)

    def update_event(self, event: Event) -> bool:
        params = _event_params(event)
        params["id"] = int(event.id)
        with self._cursor() as conn:
            result = conn.execute(
                text(
                    """
                    UPDATE events
                    SET date=:date, time=:time, kind=:kind, position=:position,
                        lunch_break=:lunch_break, work_gap=:work_gap, pair=:pair,
                        source=:source, meta=:meta, created_at=:created_at
                    WHERE id=:id
                    """
                ),
                params,
            )
            return result.rowcount > 0

    def delete_event(self, event_id: int) -> bool:
        with self._cursor() as conn:
            result = conn.execute(text("DELETE FROM events WHERE id=:id"), {"id": int(event_id)})
            return result.rowcount > 0

    def delete_events_for_date(self, day: date) -> int:
        with self._cursor() as conn:
            result = conn.execute(text("DELETE FROM events WHERE date=:date"), {"date": format_date(day)})
            return int(result.rowcount)

    def set_pair(self, event_id: int, pair: int) -> None:
        with self._cursor() as conn:
            conn.execute(
                text("UPDATE events SET pair=:pair WHERE id=:id"),
                {"pair": int(pair), "id": int(event_id)},
            )

    # -------- Day aggregate --------
    def get_day(self, day: date) -> Optional[DayRecord]:
        with self._cursor(read_only=True) as conn:
            result = conn.execute(
                text(f"SELECT {_DAY_COLUMNS} FROM work_sessions WHERE date=:date"),
                {"date": format_date(day)},
            )
            r = fetchone(result)
            return _to_day(r) if r else None

    def upsert_day(self, record: DayRecord) -> None:
        params = {
            "date": format_date(record.date),
            "position": record.position.value,
            "start_time": format_hhmm(record.start_time),
            "end_time": format_hhmm(record.end_time),
            "lunch_break": int(record.lunch_minutes),
        }
        with self._cursor() as conn:
            # Existence check, not rowcount: MySQL reports 0 rows for a no-op UPDATE.
            exists = fetchone(conn.execute(text("SELECT 1 AS found FROM work_sessions WHERE date=:date"), {"date": params["date"]}))
            if exists:
                conn.execute(
                    text(
                        """
                        UPDATE work_sessions
                        SET position=:position, start_time=:start_time, end_time=:end_time, lunch_break=:lunch_break
                        WHERE date=:date
                        """
                    ),
                    params,
                )
            else:
                conn.execute(
                    text(
                        """
                        INSERT INTO work_sessions(date, position, start_time, end_time, lunch_break)
                        VALUES(:date, :position, :start_time, :end_time, :lunch_break)
                        """
                    ),
                    params,
                )

    def delete_day(self, day: date) -> bool:
        with self._cursor() as conn:
            result = conn.execute(text("DELETE FROM work_sessions WHERE date=:date"), {"date": format_date(day)})
            return result.rowcount > 0

    # -------- Audit log --------
    def append_log(self, *, operation: str, target: str, message: str) -> None:
        with self._cursor() as conn:
            conn.execute(
                text("INSERT INTO log(date, operation, target, message) VALUES(:date, :operation, :target, :message)"),
                {
                    "date": now_local().isoformat(timespec="seconds"),
                    "operation": operation,
                    "target": target,
                    "message": message,
                },
            )

    def list_log(self, limit: int) -> Sequence[LogEntry]:
        with self._cursor(read_only=True) as conn:
            result = conn.execute(
                text(
                    """
                    SELECT id, date, operation, target, message
                    FROM log
                    ORDER BY id DESC
                    LIMIT :limit
                    """
                ),
                {"limit": int(limit)},
            )
            return [
                LogEntry(
                    log_id=int(r["id"]),
                    logged_at=r["date"],
                    operation=r["operation"],
                    target=r.get("target") or "",
                    message=r["message"],
                )
                for r in fetchall(result)
            ]
