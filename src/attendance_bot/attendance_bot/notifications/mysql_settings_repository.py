from __future__ import annotations

from ..core.enums import NotificationJob
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserSettings
from .repository import UserSettingsRepository

_COLUMNS = {
    NotificationJob.REMINDERS: "reminders_enabled",
    NotificationJob.DAILY_BRIEF: "daily_brief_enabled",
}


class MySQLUserSettingsRepository(UserSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> UserSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT reminders_enabled, daily_brief_enabled FROM user_settings WHERE user_id=%s",
                (user_id,),
            )
            r = fetchone(cur)

        if not r:
            return UserSettings(user_id=user_id)
        return UserSettings(
            user_id=user_id,
            reminders_enabled=bool(r["reminders_enabled"]),
            daily_brief_enabled=bool(r["daily_brief_enabled"]),
        )

    def toggle(self, user_id: str, job: NotificationJob) -> bool:
        column = _COLUMNS[job]
        with db_cursor(self._conn_factory) as (_, cur):
            # A missing row means "off", so the first toggle inserts "on".
            cur.execute(
                f"""
                INSERT INTO user_settings(user_id, {column}) VALUES(%s, 1)
                ON DUPLICATE KEY UPDATE {column} = NOT {column}
                """,
                (user_id,),
            )
            cur.execute(f"SELECT {column} AS enabled FROM user_settings WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
        return bool(r and r["enabled"])
