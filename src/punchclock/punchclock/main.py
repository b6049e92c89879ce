from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .export.controller import register as register_export
from .punches.controller import register as register_punches

logger = logging.getLogger(__name__)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Upper-case names of the selected settings module, then any overrides."""
    module = importlib.import_module(get_settings_module())
    settings = {name: getattr(module, name) for name in dir(module) if name.isupper()}
    settings.update(overrides or {})
    return settings


def create_app(*, settings_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = load_settings(settings_overrides)
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    logging.basicConfig(
        level=str(settings.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_container(settings=settings)
    app.extensions["punchclock"] = container
    logger.info("settings=%s db=%s", get_settings_module(), container.conn.config.safe_target)

    if bool(settings.get("AUTO_INIT_DB", False)):
        apply_schema(container.conn)
        logger.debug("schema ready (tables=%d)", len(list_tables(container.conn)))

    register_punches(app, container)
    register_export(app, container)

    return app
