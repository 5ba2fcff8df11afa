from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_bot.attendance_bot.core.constants import DEFAULT_ACTION_RETENTION_DAYS, DEFAULT_TIMEZONE
from src.attendance_bot.attendance_bot.container import build_container


def main() -> None:
    parser = argparse.ArgumentParser(description="Delete undo-log entries older than N days.")
    parser.add_argument("--days", type=int, default=DEFAULT_ACTION_RETENTION_DAYS)
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        bot_token=getattr(settings, "TELEGRAM_BOT_TOKEN", ""),
        timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        app_base_url=getattr(settings, "APP_BASE_URL", ""),
    )
    removed = container.undo_service.prune_older_than(args.days)
    print(f"OK: Removed {removed} action log entries older than {args.days} days")


if __name__ == "__main__":
    main()
