import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_bot_test"),
}

TELEGRAM_BOT_TOKEN = "123456:test-token"
TELEGRAM_WEBHOOK_SECRET = "test-secret"
JOB_SECRET = "test-job-secret"

TIMEZONE = "Asia/Kolkata"
APP_BASE_URL = "https://attendance.example.test/connect"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
