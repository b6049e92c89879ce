"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DEFAULT_WORK_DURATION = "8h"
DEFAULT_WORK_MINUTES = 8 * 60
DEFAULT_LUNCH_WINDOW = "12:30-14:00"
DEFAULT_MIN_LUNCH = 30
DEFAULT_MAX_LUNCH = 90
DEFAULT_POSITION = "O"
DEFAULT_SOURCE = "api"
DEFAULT_LOG_LIMIT = 100
