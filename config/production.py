import os

from config.config import (  # noqa: F401
    DB_CONFIG,
    GEOLOCATION_TIMEOUT_SECONDS,
    INSPECTION_HISTORY_DAYS,
    LOG_LEVEL,
    STRICT_STATUS_VALIDATION,
    WEEK_DISPLAY_DAYS,
    WEEK_STARTS_ON,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
