"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Kolkata"

# Selection masks travel inside Telegram callback_data (max 64 bytes).
MAX_SELECTABLE_CLASSES = 31

UPCOMING_CLASS_WINDOW_MINUTES = 10

DEFAULT_ACTION_RETENTION_DAYS = 30

GENERIC_FAILURE_MESSAGE = "Something didn't go through. Try again in a moment."

# Class reminders go out this long before the class starts.
REMINDER_LEAD_MINUTES = 10

# Pause between consecutive sends of a notification job.
NOTIFICATION_SEND_INTERVAL_SECONDS = 0.05
