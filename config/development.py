import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot"),
}

TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
# Matches the secret_token passed to setWebhook; empty disables the check
TELEGRAM_WEBHOOK_SECRET = os.getenv("TELEGRAM_WEBHOOK_SECRET", "")
# Sent by the scheduler calling /jobs/reminders and /jobs/daily-brief; empty disables them
JOB_SECRET = os.getenv("JOB_SECRET", "")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
# Companion web app; /start links to <APP_BASE_URL>?chatID=<chat id>
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:3000")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
