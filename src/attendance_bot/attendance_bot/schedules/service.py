from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..attendance.service import AttendanceService
from ..common.datetime_utils import as_utc, now_local
from ..core.constants import UPCOMING_CLASS_WINDOW_MINUTES
from .model import ClassRecord, ScheduleEntry
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, attendance: AttendanceService, *, tz: ZoneInfo):
        self._schedules = schedules
        self._attendance = attendance
        self._tz = tz

    def today(self, *, now: datetime | None = None) -> date:
        return (now or now_local(self._tz)).astimezone(self._tz).date()

    def tomorrow(self, *, now: datetime | None = None) -> date:
        return self.today(now=now) + timedelta(days=1)

    def get_classes_for_date(self, user_id: str, class_date: date) -> list[ClassRecord]:
        """The user's classes on a date: their batch, their enrolled courses, by start time."""

        enrollment = self._schedules.get_enrollment(user_id)
        if not enrollment or not enrollment.course_ids:
            return []

        return list(
            self._schedules.list_for_date(
                batch_id=enrollment.batch_id,
                course_ids=enrollment.course_ids,
                class_date=class_date,
            )
        )

    def get_day_overview(self, user_id: str, class_date: date) -> list[ScheduleEntry]:
        classes = self.get_classes_for_date(user_id, class_date)
        if not classes:
            return []

        statuses = self._attendance.get_status_bulk(user_id, [c.class_id for c in classes])
        marked = {s.class_id: s.is_marked for s in statuses}
        return [ScheduleEntry(record=c, is_marked=marked.get(c.class_id, False)) for c in classes]

    def find_current_or_upcoming(self, classes: Sequence[ClassRecord], *, now: datetime | None = None) -> Optional[int]:
        """0-based position of the first class that is ongoing or starts soon."""

        now = as_utc(now or now_local(self._tz))
        window = timedelta(minutes=UPCOMING_CLASS_WINDOW_MINUTES)

        for position, cls in enumerate(classes):
            start = as_utc(cls.start_time)
            end = as_utc(cls.end_time)
            if start <= now <= end:
                return position
            if start > now and start - now <= window:
                return position
        return None
