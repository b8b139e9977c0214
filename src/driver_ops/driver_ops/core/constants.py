"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GEOLOCATION_TIMEOUT_SECONDS = 5
DEFAULT_INSPECTION_HISTORY_DAYS = 90
DEFAULT_WEEK_DISPLAY_DAYS = 7
DEFAULT_WEEK_STARTS_ON = "sunday"
