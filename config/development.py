import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pointage_rh"),
}

# Working day: check-in after 08:30 is late, after 09:00 absent, overtime from 18:00
TIME_WINDOW = {
    "STANDARD_START": os.getenv("STANDARD_START", "08:00"),
    "LATE_THRESHOLD_MINUTES": int(os.getenv("LATE_THRESHOLD_MINUTES", "30")),
    "ABSENT_THRESHOLD_HOUR": float(os.getenv("ABSENT_THRESHOLD_HOUR", "9")),
    "OVERTIME_START_HOUR": float(os.getenv("OVERTIME_START_HOUR", "18")),
    "MIDDAY": os.getenv("MIDDAY", "12:00"),
}

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_BASE_URL = os.getenv("UPLOAD_BASE_URL", "/uploads")
RECORDED_BY = os.getenv("RECORDED_BY", "RH")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
