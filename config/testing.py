import os

from config.config import (  # noqa: F401
    GEOLOCATION_TIMEOUT_SECONDS,
    INSPECTION_HISTORY_DAYS,
    WEEK_DISPLAY_DAYS,
    WEEK_STARTS_ON,
)

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "driver_ops_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STRICT_STATUS_VALIDATION = bool(int(os.getenv("STRICT_STATUS_VALIDATION", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
