from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .clock.controller import register as register_clock
from .container import build_container
from .database.bootstrap import SchemaInstaller
from .database.connection import DBConfig
from .inspections.controller import register as register_inspections
from .routes.controller import register as register_routes
from .timecards.controller import register as register_timecards

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info("[driver-ops] settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        installer = SchemaInstaller(DBConfig.from_mapping(db_config))
        installer.apply(schema_path)
        missing = installer.missing_tables()
        if missing:
            logger.warning("[driver-ops] schema applied but tables are missing: %s", ", ".join(missing))

    container = build_container(
        db_config=db_config,
        strict_status_validation=bool(getattr(settings, "STRICT_STATUS_VALIDATION", False)),
        geolocation_timeout_seconds=float(getattr(settings, "GEOLOCATION_TIMEOUT_SECONDS", 5)),
        inspection_history_days=int(getattr(settings, "INSPECTION_HISTORY_DAYS", 90)),
        week_starts_on=getattr(settings, "WEEK_STARTS_ON", "sunday"),
        week_display_days=int(getattr(settings, "WEEK_DISPLAY_DAYS", 7)),
    )

    register_inspections(app, container)
    register_clock(app, container)
    register_timecards(app, container)
    register_routes(app, container)
    register_attendance(app, container)

    return app
