from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import CourseAttendance
from .repository import CourseAttendanceRepository


class MySQLCourseAttendanceRepository(CourseAttendanceRepository):
    """Reads the stored procedure that merges the historical snapshot with deltas.

    The procedure is owned by the snapshot pipeline; only its output shape is
    relied on here.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_effective_course_attendance(self, user_id: str) -> Sequence[CourseAttendance]:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.callproc("get_effective_course_attendance", (user_id,))
            rows: list[dict] = []
            for result in cur.stored_results():
                columns = result.column_names
                rows.extend(dict(zip(columns, values)) for values in result.fetchall())

        return [
            CourseAttendance(
                course_id=str(r["course_id"]),
                course_name=r["course_name"],
                is_lab=bool(r.get("is_lab")),
                attended=int(r.get("effective_attended_classes") or 0),
                total=int(r.get("effective_total_classes") or 0),
            )
            for r in rows
        ]
