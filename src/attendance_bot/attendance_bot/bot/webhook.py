from __future__ import annotations

import hmac
import logging
import time

from flask import Flask, abort, jsonify, request
from telegram import Update
from telegram.error import TelegramError

from ..container import Container
from ..core.enums import NotificationJob
from ..core.exceptions import StoreError
from ..notifications.jobs import run_job
from .context import TelegramContext
from .router import UpdateRouter

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"
JOB_SECRET_HEADER = "X-Job-Secret"


def _secret_matches(header: str, secret: str) -> bool:
    return hmac.compare_digest(request.headers.get(header, ""), secret)


def register(app: Flask, container: Container, router: UpdateRouter) -> None:
    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return "Attendance bot is running", 200

    @app.route("/telegram/webhook", methods=["POST"], endpoint="telegram_webhook")
    async def telegram_webhook():
        secret = container.settings.webhook_secret
        if secret and not _secret_matches(SECRET_HEADER, secret):
            abort(403)

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify(ok=False, error="invalid update"), 400

        started = time.perf_counter()
        update_id = payload.get("update_id")
        try:
            async with container.bot_session() as bot:
                update = Update.de_json(payload, bot)
                await router.dispatch(TelegramContext(update, bot))
        except TelegramError:
            # Telegram redelivers on 5xx. Mutations are idempotent, so a
            # retried update is safe.
            logger.exception("Telegram API unavailable while handling update %s", update_id)
            return jsonify(ok=False), 503
        finally:
            logger.info("Webhook update %s handled in %dms", update_id, (time.perf_counter() - started) * 1000)

        return jsonify(ok=True)

    @app.route("/jobs/<name>", methods=["POST"], endpoint="notification_job")
    async def notification_job(name: str):
        secret = container.settings.job_secret
        if not secret or not _secret_matches(JOB_SECRET_HEADER, secret):
            abort(403)

        try:
            job = NotificationJob(name)
        except ValueError:
            return jsonify(ok=False, error=f"unknown job {name!r}"), 400

        try:
            async with container.bot_session() as bot:
                report = await run_job(job, container.notification_service, bot)
        except StoreError:
            logger.exception("[%s] Could not load recipients", job.value)
            return jsonify(ok=False), 503

        return jsonify(ok=True, **report.as_dict())
