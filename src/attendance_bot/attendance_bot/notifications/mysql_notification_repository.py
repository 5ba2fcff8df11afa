from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..common.datetime_utils import to_utc_naive
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import BriefRecipient, PendingReminder
from .repository import NotificationRepository

_PENDING_REMINDERS = """
    SELECT m.chat_id, m.user_id, t.class_id, t.course_name, t.class_start_time, t.class_venue
    FROM telegram_user_mappings m
    JOIN user_settings s ON s.user_id = m.user_id AND s.reminders_enabled = 1
    JOIN user_course_records u ON u.user_id = m.user_id
    JOIN timetable_records t
      ON t.batch_id = u.batch_id
     AND JSON_CONTAINS(u.enrolled_courses, JSON_QUOTE(t.course_id))
    LEFT JOIN class_notification_log l ON l.user_id = m.user_id AND l.class_id = t.class_id
    WHERE t.class_start_time > %s AND t.class_start_time <= %s
      AND l.class_id IS NULL
    ORDER BY t.class_start_time, m.chat_id
"""

_BRIEF_RECIPIENTS = """
    SELECT m.chat_id, m.user_id
    FROM telegram_user_mappings m
    JOIN user_settings s ON s.user_id = m.user_id AND s.daily_brief_enabled = 1
    LEFT JOIN daily_brief_log l ON l.user_id = m.user_id AND l.brief_date = %s
    WHERE l.user_id IS NULL
    ORDER BY m.chat_id
"""


class MySQLNotificationRepository(NotificationRepository):
    """Claims go through INSERT IGNORE on the log tables' primary keys.

    Of two overlapping job runs only one gets rowcount 1 for a given row, so
    each reminder and brief is handed out once.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def claim_pending_reminders(self, *, window_start: datetime, window_end: datetime) -> Sequence[PendingReminder]:
        claimed: list[PendingReminder] = []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_PENDING_REMINDERS, (to_utc_naive(window_start), to_utc_naive(window_end)))
            for r in fetchall(cur):
                cur.execute(
                    "INSERT IGNORE INTO class_notification_log(user_id, class_id) VALUES(%s,%s)",
                    (r["user_id"], r["class_id"]),
                )
                if cur.rowcount != 1:
                    continue
                claimed.append(
                    PendingReminder(
                        chat_id=int(r["chat_id"]),
                        user_id=str(r["user_id"]),
                        class_id=str(r["class_id"]),
                        course_name=r["course_name"],
                        start_time=r["class_start_time"],
                        venue=r.get("class_venue"),
                    )
                )
        return claimed

    def claim_brief_recipients(self, brief_date: date) -> Sequence[BriefRecipient]:
        claimed: list[BriefRecipient] = []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_BRIEF_RECIPIENTS, (brief_date,))
            for r in fetchall(cur):
                cur.execute(
                    "INSERT IGNORE INTO daily_brief_log(user_id, brief_date) VALUES(%s,%s)",
                    (r["user_id"], brief_date),
                )
                if cur.rowcount == 1:
                    claimed.append(BriefRecipient(chat_id=int(r["chat_id"]), user_id=str(r["user_id"])))
        return claimed
