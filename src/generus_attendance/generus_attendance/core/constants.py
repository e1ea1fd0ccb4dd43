"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BARCODE_PREFIX = "GEN"
DEFAULT_RECENT_ACTIVITY_LIMIT = 10
DEFAULT_SESSION_DAYS = 7

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MIN_SCORE = 0
MAX_SCORE = 100
