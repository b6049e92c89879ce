from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from sqlalchemy import inspect

from .connection import DatabaseConnection
from .sql_base import db_cursor

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent


def schema_path_for(conn_factory: DatabaseConnection) -> Path:
    name = "schema.sqlite.sql" if conn_factory.config.is_sqlite else "schema.mysql.sql"
    return SCHEMA_DIR / name


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "-" and not in_single and not in_double and buf and buf[-1] == "-":
            buf.pop()
            in_comment = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path | None = None) -> None:
    """Create missing tables (idempotent: CREATE ... IF NOT EXISTS)."""
    path = Path(schema_path) if schema_path else schema_path_for(conn_factory)
    sql = path.read_text(encoding="utf-8")

    with db_cursor(conn_factory) as conn:
        for stmt in _iter_sql_statements(sql):
            conn.exec_driver_sql(stmt)
    logger.info("schema applied from %s", path.name)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    return sorted(inspect(conn_factory.engine).get_table_names())
