from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_local
from ..core.constants import REMINDER_LEAD_MINUTES
from ..core.enums import NotificationJob
from ..core.exceptions import StoreError
from ..schedules.service import ScheduleService
from ..stats.model import CourseAttendance
from ..stats.service import StatsService
from .messages import format_class_reminder, format_daily_brief
from .model import OutgoingMessage, UserSettings
from .repository import NotificationRepository, UserSettingsRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Opt-in toggles plus the messages the scheduled jobs send.

    Building a job's messages claims its recipients, so calling a builder
    twice for the same window yields nothing the second time.
    """

    def __init__(
        self,
        settings: UserSettingsRepository,
        notifications: NotificationRepository,
        schedules: ScheduleService,
        stats: StatsService,
        *,
        tz: ZoneInfo,
    ):
        self._settings = settings
        self._notifications = notifications
        self._schedules = schedules
        self._stats = stats
        self._tz = tz

    def get_settings(self, user_id: str) -> UserSettings:
        return self._settings.get(user_id)

    def toggle_reminders(self, user_id: str) -> bool:
        enabled = self._settings.toggle(user_id, NotificationJob.REMINDERS)
        logger.info("User %s turned class reminders %s", user_id, "on" if enabled else "off")
        return enabled

    def toggle_daily_brief(self, user_id: str) -> bool:
        enabled = self._settings.toggle(user_id, NotificationJob.DAILY_BRIEF)
        logger.info("User %s turned the daily brief %s", user_id, "on" if enabled else "off")
        return enabled

    def build(self, job: NotificationJob, *, now: datetime | None = None) -> list[OutgoingMessage]:
        if job == NotificationJob.REMINDERS:
            return self.build_class_reminders(now=now)
        return self.build_daily_briefs(now=now)

    def build_class_reminders(self, *, now: datetime | None = None) -> list[OutgoingMessage]:
        now = now or now_local(self._tz)
        pending = self._notifications.claim_pending_reminders(
            window_start=now,
            window_end=now + timedelta(minutes=REMINDER_LEAD_MINUTES),
        )
        return [OutgoingMessage(chat_id=r.chat_id, text=format_class_reminder(r, self._tz)) for r in pending]

    def build_daily_briefs(self, *, now: datetime | None = None) -> list[OutgoingMessage]:
        today = (now or now_local(self._tz)).astimezone(self._tz).date()
        messages: list[OutgoingMessage] = []

        for recipient in self._notifications.claim_brief_recipients(today):
            try:
                classes = self._schedules.get_classes_for_date(recipient.user_id, today)
            except StoreError:
                logger.exception("Daily brief: could not load classes for user %s", recipient.user_id)
                continue

            courses: Optional[list[CourseAttendance]]
            try:
                courses = self._stats.get_course_attendance(recipient.user_id)
            except StoreError:
                logger.warning("Daily brief: attendance unavailable for user %s", recipient.user_id, exc_info=True)
                courses = None

            messages.append(
                OutgoingMessage(
                    chat_id=recipient.chat_id,
                    text=format_daily_brief(today, classes, courses, self._tz),
                )
            )
        return messages
