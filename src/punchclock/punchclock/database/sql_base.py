from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.engine import Connection, CursorResult

from .connection import READ_ONLY_OPTION, DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, read_only: bool = False) -> Iterator[Connection]:
    """One connection, one transaction: commit on success, roll back on any error.

    `read_only` transactions skip the SQLite write lock and only see a snapshot.
    """
    conn = conn_factory.connect()
    try:
        if read_only:
            conn.execution_options(**{READ_ONLY_OPTION: True})
        trans = conn.begin()
        try:
            yield conn
            trans.commit()
        except Exception:
            trans.rollback()
            raise
    finally:
        conn.close()


def fetchone(result: CursorResult) -> Optional[Dict[str, Any]]:
    row = result.mappings().first()
    return dict(row) if row else None


def fetchall(result: CursorResult) -> List[Dict[str, Any]]:
    return [dict(r) for r in result.mappings().all()]


def normalize_sql_date(value: Any) -> date:
    """SQLite returns TEXT 'YYYY-MM-DD', MySQL returns datetime.date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    raise TypeError(f"Unsupported DATE value type: {type(value)!r}")


def normalize_sql_time(value: Any) -> Optional[time]:
    """Normalize TIME values across drivers.

    Drivers can return TIME as:
    - datetime.time
    - datetime.timedelta (mysql-connector)
    - string (e.g. '08:30' or '08:30:00', SQLite TEXT columns)
    """

    if value is None or value == "":
        return None

    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        return time(hour=hours, minute=minutes)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(hour=int(parts[0]), minute=int(parts[1]))

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")
