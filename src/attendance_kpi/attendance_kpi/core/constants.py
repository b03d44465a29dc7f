"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_REPORT_DAYS = 30
DEFAULT_TIMEZONE = "UTC"
DEFAULT_PUNCTUALITY_CUTOFF = time(9, 30)
DEFAULT_STANDARD_WORKDAY_HOURS = 8

# Monday=0 ... Friday=4, matches date.weekday().
WORKDAY_WEEKDAYS = frozenset({0, 1, 2, 3, 4})

SECONDS_PER_HOUR = 3600
