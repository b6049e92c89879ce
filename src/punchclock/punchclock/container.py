from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .core.work_config import WorkConfig
from .database.connection import DBConfig, DatabaseConnection
from .events.sql_event_repository import SqlEventStore
from .export.service import ExportService
from .punches.service import PunchService
from .summary.service import SummaryService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    work_config: WorkConfig

    event_store: SqlEventStore

    punch_service: PunchService
    summary_service: SummaryService
    export_service: ExportService


def build_container(*, settings: Mapping[str, Any]) -> Container:
    db_config = DBConfig(
        url=str(settings.get("DATABASE_URL") or "sqlite:///punchclock.sqlite"),
        echo=bool(settings.get("SQL_ECHO", False)),
    )
    conn = DatabaseConnection.get_instance(db_config)
    work_config = WorkConfig.from_settings(settings)

    event_store = SqlEventStore(conn)

    punch_service = PunchService(event_store, work_config)
    summary_service = SummaryService(event_store, work_config)
    export_service = ExportService(event_store, summary_service)

    return Container(
        conn=conn,
        work_config=work_config,
        event_store=event_store,
        punch_service=punch_service,
        summary_service=summary_service,
        export_service=export_service,
    )
