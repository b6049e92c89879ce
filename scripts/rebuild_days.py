"""Recompute stored pair numbers and day aggregates for every date."""

from __future__ import annotations

import logging

import _bootstrap  # noqa: F401

from punchclock.container import build_container
from punchclock.main import load_settings


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    container = build_container(settings=load_settings())

    count = container.punch_service.rebuild_all()
    print(f"OK: Rebuilt {count} days")


if __name__ == "__main__":
    main()
