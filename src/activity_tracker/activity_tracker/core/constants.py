"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SECONDS_PER_DAY = 86400
DEFAULT_BREAK_REASON = "Personal"
DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
DEFAULT_SUMMARY_DAYS = 7
MAX_SUMMARY_DAYS = 366
LOCK_NAME_PREFIX = "activity"
