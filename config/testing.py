import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pointage_rh_test"),
}

TIME_WINDOW = {
    "STANDARD_START": "08:00",
    "LATE_THRESHOLD_MINUTES": 30,
    "ABSENT_THRESHOLD_HOUR": 9,
    "OVERTIME_START_HOUR": 18,
    "MIDDAY": "12:00",
}

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads-test")
UPLOAD_BASE_URL = "/uploads"
RECORDED_BY = "RH"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
