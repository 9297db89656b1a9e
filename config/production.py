import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "adms_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MINUTES_FOR_PRESENT = int(os.getenv("MINUTES_FOR_PRESENT", "360"))
CALLBACK_URL = os.getenv("CALLBACK_URL") or None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
START_DEVICE_MONITOR = bool(int(os.getenv("START_DEVICE_MONITOR", "1")))
