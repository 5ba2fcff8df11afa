from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

from ..core.constants import NOTIFICATION_SEND_INTERVAL_SECONDS
from ..core.enums import NotificationJob
from .model import JobReport
from .service import NotificationService

logger = logging.getLogger(__name__)


async def run_job(
    job: NotificationJob,
    notifications: NotificationService,
    bot: Bot,
    *,
    now: datetime | None = None,
    send_interval: float = NOTIFICATION_SEND_INTERVAL_SECONDS,
) -> JobReport:
    """Build the job's messages and send them one at a time.

    A failed send is counted and logged; it never stops the rest.
    """

    started = time.perf_counter()
    messages = notifications.build(job, now=now)
    logger.info("[%s] %d messages to send", job.value, len(messages))

    sent = failed = 0
    for position, message in enumerate(messages):
        if position and send_interval:
            await asyncio.sleep(send_interval)
        try:
            await bot.send_message(chat_id=message.chat_id, text=message.text, parse_mode=ParseMode.MARKDOWN)
        except TelegramError:
            failed += 1
            logger.exception("[%s] Send to chat %s failed", job.value, message.chat_id)
        else:
            sent += 1

    report = JobReport(
        job=job,
        total=len(messages),
        sent=sent,
        failed=failed,
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
    logger.info(
        "[%s] Completed in %dms: %d sent, %d failed, %d total",
        job.value, report.duration_ms, report.sent, report.failed, report.total,
    )
    return report
