import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pointage_rh"),
}

TIME_WINDOW = {
    "STANDARD_START": os.getenv("STANDARD_START", "08:00"),
    "LATE_THRESHOLD_MINUTES": int(os.getenv("LATE_THRESHOLD_MINUTES", "30")),
    "ABSENT_THRESHOLD_HOUR": float(os.getenv("ABSENT_THRESHOLD_HOUR", "9")),
    "OVERTIME_START_HOUR": float(os.getenv("OVERTIME_START_HOUR", "18")),
    "MIDDAY": os.getenv("MIDDAY", "12:00"),
}

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/var/lib/pointage_rh/uploads")
UPLOAD_BASE_URL = os.getenv("UPLOAD_BASE_URL", "/uploads")
RECORDED_BY = os.getenv("RECORDED_BY", "RH")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
