import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot"),
}

TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_WEBHOOK_SECRET = os.getenv("TELEGRAM_WEBHOOK_SECRET", "")
# Sent by the scheduler calling /jobs/reminders and /jobs/daily-brief; empty disables them
JOB_SECRET = os.getenv("JOB_SECRET", "")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
APP_BASE_URL = os.getenv("APP_BASE_URL", "https://please-set-APP_BASE_URL")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
