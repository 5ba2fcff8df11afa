from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables

from .container import build_container
from .bot.router import UpdateRouter
from .bot.webhook import register as register_webhook
from .attendance.controller import register as register_attendance
from .notifications.controller import register as register_notifications
from .schedules.controller import register as register_schedules
from .stats.controller import register as register_stats
from .undo.controller import register as register_undo
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        bot_token=getattr(settings, "TELEGRAM_BOT_TOKEN"),
        timezone=getattr(settings, "TIMEZONE", "Asia/Kolkata"),
        app_base_url=getattr(settings, "APP_BASE_URL"),
        webhook_secret=getattr(settings, "TELEGRAM_WEBHOOK_SECRET", None),
        job_secret=getattr(settings, "JOB_SECRET", None),
    )

    router = UpdateRouter(container.account_service)
    register_users(router, container)
    register_schedules(router, container)
    register_attendance(router, container)
    register_undo(router, container)
    register_stats(router, container)
    register_notifications(router, container)

    register_webhook(app, container, router)

    return app
