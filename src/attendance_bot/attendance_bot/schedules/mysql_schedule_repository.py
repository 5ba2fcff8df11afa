from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import ClassRecord, Enrollment
from .repository import ScheduleRepository

_CLASS_COLUMNS = """
    class_id, course_id, course_name, is_lab, class_date,
    class_start_time, class_end_time, class_venue, batch_id
"""


def _to_class_record(r: Dict[str, Any]) -> ClassRecord:
    return ClassRecord(
        class_id=str(r["class_id"]),
        course_id=str(r["course_id"]),
        course_name=r["course_name"],
        is_lab=bool(r.get("is_lab")),
        class_date=r["class_date"],
        start_time=r["class_start_time"],
        end_time=r["class_end_time"],
        venue=r.get("class_venue"),
        batch_id=str(r["batch_id"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_enrollment(self, user_id: str) -> Optional[Enrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, batch_id, enrolled_courses FROM user_course_records WHERE user_id=%s",
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            courses = r.get("enrolled_courses") or "[]"
            if isinstance(courses, (bytes, str)):
                courses = json.loads(courses)

            return Enrollment(
                user_id=str(r["user_id"]),
                batch_id=str(r["batch_id"]),
                course_ids=tuple(str(c) for c in courses),
            )

    def list_for_date(self, *, batch_id: str, course_ids: Sequence[str], class_date: date) -> Sequence[ClassRecord]:
        if not course_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM timetable_records
                WHERE class_date=%s AND batch_id=%s AND course_id IN ({in_placeholders(course_ids)})
                ORDER BY class_start_time ASC, class_id ASC
                """,
                (class_date, batch_id, *course_ids),
            )
            return [_to_class_record(r) for r in fetchall(cur)]

    def get_by_ids(self, class_ids: Sequence[str]) -> Sequence[ClassRecord]:
        if not class_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM timetable_records
                WHERE class_id IN ({in_placeholders(class_ids)})
                """,
                tuple(class_ids),
            )
            by_id = {str(r["class_id"]): _to_class_record(r) for r in fetchall(cur)}

        # Keep the caller's order.
        return [by_id[cid] for cid in dict.fromkeys(class_ids) if cid in by_id]
