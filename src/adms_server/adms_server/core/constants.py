"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PRESENT_MINUTES = 360

DEVICE_OFFLINE_THRESHOLD_MS = 30_000
DEVICE_SWEEP_INTERVAL_MS = 5_000
LAST_SEEN_DEBOUNCE_MS = 10_000

NOTIFY_TIMEOUT_SECONDS = 5

ATTLOG_TABLE = "ATTLOG"
UNKNOWN_IDENTITY = "UNKNOWN"

DEFAULT_PUNCH_LIST_LIMIT = 100
BACKGROUND_WRITER_WORKERS = 4
