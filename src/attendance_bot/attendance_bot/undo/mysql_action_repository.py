from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc, to_utc_naive
from ..core.enums import ActionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceAction
from .repository import ActionLogRepository


class MySQLActionLogRepository(ActionLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, user_id: str, action_type: ActionType, class_ids: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_actions(user_id, action_type, affected_class_ids)
                VALUES(%s,%s,%s)
                """,
                (user_id, action_type.value, json.dumps(list(class_ids))),
            )
            return int(cur.lastrowid)

    def get_latest(self, user_id: str) -> Optional[AttendanceAction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT action_id, user_id, action_type, affected_class_ids, created_at
                FROM attendance_actions
                WHERE user_id=%s
                ORDER BY created_at DESC, action_id DESC
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            class_ids = r["affected_class_ids"]
            if isinstance(class_ids, (bytes, str)):
                class_ids = json.loads(class_ids)

            return AttendanceAction(
                action_id=int(r["action_id"]),
                user_id=str(r["user_id"]),
                action_type=ActionType(r["action_type"]),
                affected_class_ids=tuple(str(c) for c in class_ids),
                created_at=as_utc(r["created_at"]),
            )

    def delete(self, action_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_actions WHERE action_id=%s", (int(action_id),))
            return cur.rowcount > 0

    def prune_before(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_actions WHERE created_at < %s", (to_utc_naive(cutoff),))
            return int(cur.rowcount)
