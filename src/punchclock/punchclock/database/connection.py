from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    url: str
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    @property
    def safe_target(self) -> str:
        return make_url(self.url).render_as_string(hide_password=True)


READ_ONLY_OPTION = "punchclock_read_only"


def _enable_immediate_transactions(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write; take the write lock up front
    # so a second process never reads a day whose pairs are being recomputed.
    # Read-only transactions keep a plain deferred BEGIN (shared snapshot only).
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


class DatabaseConnection:
    """Singleton-like engine holder.

    Note: We open short-lived connections per operation (one command, one transaction).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._engine = create_engine(config.url, echo=config.echo)
        if config.is_sqlite:
            _enable_immediate_transactions(self._engine)

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def engine(self) -> Engine:
        return self._engine

    def connect(self) -> Connection:
        return self._engine.connect()

    def dispose(self) -> None:
        self._engine.dispose()
