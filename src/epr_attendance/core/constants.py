"""Constants and defaults.

Note: Keep policy constants here to avoid magic numbers spread across code.
"""

from datetime import time

NOMINAL_START = time(7, 30)
NOMINAL_END = time(15, 30)
MINUTES_PER_WORKDAY = 480

# delta_start in [1..30] snaps to a flat 30 minute lateness bucket
LATE_BUCKET_MINUTES = 30
LATE_NORMALIZE_GRACE_MAX = 30
BIG_LATE_PLUS_MINUTES = 5

EXCESSIVE_DURATION_MINUTES = 16 * 60
SPLIT_SHIFT_MIN_MINUTES = 15
SUSPICIOUS_SHORT_MAX_MINUTES = 2

LATE_DEBT_MULTIPLIER = 1
EARLY_OVERTIME_THRESHOLD_MINUTES = 20
EARLY_OVERTIME_DEDUCT_MINUTES = 5

WFH_NOTE_MARKER = "001_RadOdKuce"
COLLECTIVE_LEAVE_TEXT = "kolektivni go"
ONSITE_READER_ADDRESSES = frozenset({"192.168.100.77", "192.168.100.41"})

DATE_FORMAT_ISO = "%Y-%m-%d"
DATETIME_FORMAT_DMYHM = "%d/%m/%Y %H:%M"

USE_CASE = "epr_attendance_v1"
RULES_VERSION = "1.0.0"
DEFAULT_TIMEZONE = "Europe/Zagreb"
DEFAULT_RECAP_TOP_N = 5
