"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_HOURS_PER_DAY = 24
# Matches the DECIMAL(4, 2) column holding task hours.
HOURS_DECIMAL_PLACES = 2
MIN_PROGRESS = 0
MAX_PROGRESS = 100
MIN_PASSWORD_LENGTH = 8
DEFAULT_SESSION_DAYS = 7
DEFAULT_USER_SEARCH_LIMIT = 200
