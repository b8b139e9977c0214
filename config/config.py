import os

SECRET_KEY = os.getenv("SECRET_KEY", "driver-ops-secret")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "driver_ops"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Reject picked_up at drop-off stops (and dropped_off at pickups) when enabled.
STRICT_STATUS_VALIDATION = bool(int(os.getenv("STRICT_STATUS_VALIDATION", "0")))

GEOLOCATION_TIMEOUT_SECONDS = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "5"))

# Timecard screen defaults; any closed range can still be requested.
WEEK_STARTS_ON = os.getenv("WEEK_STARTS_ON", "sunday").lower()
WEEK_DISPLAY_DAYS = int(os.getenv("WEEK_DISPLAY_DAYS", "7"))

INSPECTION_HISTORY_DAYS = int(os.getenv("INSPECTION_HISTORY_DAYS", "90"))
