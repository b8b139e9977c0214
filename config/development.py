import os

from config.config import (  # noqa: F401
    DB_CONFIG,
    GEOLOCATION_TIMEOUT_SECONDS,
    INSPECTION_HISTORY_DAYS,
    STRICT_STATUS_VALIDATION,
    WEEK_DISPLAY_DAYS,
    WEEK_STARTS_ON,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
