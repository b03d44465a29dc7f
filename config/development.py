import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_kpi"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Organization clock: every punch is bucketed into calendar days of this zone.
TIMEZONE = os.getenv("TIMEZONE", "UTC")
PUNCTUALITY_CUTOFF = os.getenv("PUNCTUALITY_CUTOFF", "09:30")
STANDARD_WORKDAY_HOURS = float(os.getenv("STANDARD_WORKDAY_HOURS", "8"))
DEFAULT_REPORT_DAYS = int(os.getenv("DEFAULT_REPORT_DAYS", "30"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
