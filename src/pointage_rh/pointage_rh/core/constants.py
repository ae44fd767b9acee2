"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_SCANS_LIMIT = 10

# Working day defaults (overridable through TIME_WINDOW settings)
DEFAULT_STANDARD_START = "08:00"
DEFAULT_LATE_THRESHOLD_MINUTES = 30
DEFAULT_ABSENT_THRESHOLD_HOUR = 9.0
DEFAULT_OVERTIME_START_HOUR = 18.0
DEFAULT_MIDDAY = "12:00"

QR_PAYLOAD_PREFIX = "EMPLOYEE:"
DEFAULT_RECORDED_BY = "RH"

# An advance above this share of the monthly salary needs an explicit confirmation
ADVANCE_SALARY_RATIO = "0.5"
MIN_PASSWORD_LENGTH = 6
