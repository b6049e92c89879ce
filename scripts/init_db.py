from __future__ import annotations

import logging

import _bootstrap  # noqa: F401

from punchclock.container import build_container
from punchclock.database.bootstrap import apply_schema, list_tables
from punchclock.main import load_settings


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    container = build_container(settings=load_settings())

    apply_schema(container.conn)
    tables = list_tables(container.conn)
    print(f"OK: Applied schema -> {container.conn.config.safe_target} (tables={len(tables)})")


if __name__ == "__main__":
    main()
