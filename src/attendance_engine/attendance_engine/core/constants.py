"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_CLOCK_IN = time(9, 0)
DEFAULT_CLOCK_OUT = time(17, 0)
HOLIDAY_CLOCK_OUT = time(18, 0)
HALF_DAY_CLOCK_OUT = time(13, 0)
DEFAULT_LOCATION = "office"
DEFAULT_UPDATED_BY = "admin"
SYSTEM_ACTOR = "system"

# Trailing window scanned by the past-holiday repair job.
REPAIR_WINDOW_MONTHS = 6

# Upper bound enforced by the HTTP layer for admin range edits.
MAX_BULK_RANGE_DAYS = 31

DEFAULT_ORG_UTC_OFFSET_MINUTES = 330
DEFAULT_BATCH_MAX_WORKERS = 4
DEFAULT_NOTIFY_TIMEOUT_SECONDS = 5.0

KNOWN_PUBLIC_HOLIDAYS = (
    ("2024-08-15", "Independence Day"),
    ("2024-10-02", "Gandhi Jayanti"),
    ("2024-12-25", "Christmas"),
    ("2025-01-26", "Republic Day"),
    ("2025-08-15", "Independence Day"),
    ("2025-10-02", "Gandhi Jayanti"),
    ("2025-12-25", "Christmas"),
    ("2026-01-26", "Republic Day"),
    ("2026-08-15", "Independence Day"),
    ("2026-10-02", "Gandhi Jayanti"),
    ("2026-12-25", "Christmas"),
)
