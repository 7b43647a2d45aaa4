"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_TOLERANCE_MINUTES = 15
DEFAULT_SESSION_ID = "default"
DEFAULT_SESSION_NAME = "Attendance"

# Recap tiers: minimum present percentage for each bucket.
TIER_EXCELLENT_MIN = 85
TIER_GOOD_MIN = 70
TIER_FAIR_MIN = 50

DEFAULT_TREND_EVENTS = 5
