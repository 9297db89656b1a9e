import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "adms_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Attendance: minimum span between first and last punch to count as PRESENT
MINUTES_FOR_PRESENT = int(os.getenv("MINUTES_FOR_PRESENT", "360"))
# Optional endpoint receiving every computed attendance record
CALLBACK_URL = os.getenv("CALLBACK_URL") or None

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
START_DEVICE_MONITOR = bool(int(os.getenv("START_DEVICE_MONITOR", "1")))
