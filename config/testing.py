import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "adms_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

MINUTES_FOR_PRESENT = 360
CALLBACK_URL = None

AUTO_INIT_DB = False
START_DEVICE_MONITOR = False
