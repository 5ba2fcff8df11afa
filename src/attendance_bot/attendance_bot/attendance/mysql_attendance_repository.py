from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Sequence

from ..common.datetime_utils import to_utc_naive
from ..core.enums import MarkStatus
from ..core.exceptions import StoreError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders
from ..schedules.model import ClassRecord
from .model import AttendanceStatusRow, DeleteResult, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _json_rows(value: Any) -> list[dict]:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return list(value or [])


def _call_bulk(cur, procedure: str, args: tuple) -> list[dict]:
    """Run one bulk procedure; each returns a single JSON array of per-class rows."""

    cur.callproc(procedure, args)
    rows: list[dict] = []
    for result in cur.stored_results():
        for values in result.fetchall():
            rows.extend(_json_rows(values[0]))
    return rows


def _mark_status(value: Any) -> MarkStatus:
    try:
        return MarkStatus(value)
    except ValueError:
        logger.warning("mark_attendance_bulk returned unknown status %r", value)
        return MarkStatus.FAILED


class MySQLAttendanceRepository(AttendanceRepository):
    """Bulk writes go through stored procedures (database/schema.sql).

    One CALL covers every class of the request, so the number of round trips
    does not grow with the selection and the whole batch shares one
    transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def mark_bulk(
        self,
        *,
        user_id: str,
        class_ids: Sequence[str],
        course_ids: Sequence[str],
        class_times: Sequence[datetime],
        checkin_time: datetime,
    ) -> Sequence[MarkResult]:
        if not (len(class_ids) == len(course_ids) == len(class_times)):
            raise ValidationError("class_ids, course_ids and class_times must have the same length")
        if not class_ids:
            return []

        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            results = self._mark(cur, user_id, list(zip(class_ids, course_ids, class_times)), checkin_time)

        for result in results:
            if result.status == MarkStatus.FAILED:
                logger.warning("mark_bulk: class %s failed for user %s", result.class_id, user_id)
        return results

    @staticmethod
    def _mark(cur, user_id: str, items: list[tuple[str, str, datetime]], checkin_time: datetime) -> list[MarkResult]:
        # The unique key on (user_id, class_id) decides "already" inside the
        # procedure; a constraint error fails that class only.
        payload = json.dumps(
            [
                {
                    "class_id": class_id,
                    "course_id": course_id,
                    "class_time": to_utc_naive(class_time).isoformat(sep=" "),
                }
                for class_id, course_id, class_time in items
            ]
        )
        rows = _call_bulk(cur, "mark_attendance_bulk", (user_id, payload, to_utc_naive(checkin_time)))
        return [MarkResult(class_id=str(r["class_id"]), status=_mark_status(r.get("status"))) for r in rows]

    def delete_bulk(self, *, user_id: str, class_ids: Sequence[str]) -> Sequence[DeleteResult]:
        if not class_ids:
            return []

        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            rows = _call_bulk(cur, "delete_attendance_bulk", (user_id, json.dumps(list(class_ids))))
        return [DeleteResult(class_id=str(r["class_id"]), deleted=bool(r.get("deleted"))) for r in rows]

    def status_bulk(self, *, user_id: str, class_ids: Sequence[str]) -> Sequence[AttendanceStatusRow]:
        if not class_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT class_id
                FROM attendance_records
                WHERE user_id=%s AND class_id IN ({in_placeholders(class_ids)})
                """,
                (user_id, *class_ids),
            )
            marked = {str(r["class_id"]) for r in fetchall(cur)}

        return [AttendanceStatusRow(class_id=cid, is_marked=cid in marked) for cid in class_ids]

    def restore_bulk(self, *, user_id: str, classes: Sequence[ClassRecord], checkin_time: datetime) -> int:
        if not classes:
            return 0

        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            results = self._mark(
                cur,
                user_id,
                [(c.class_id, c.course_id, c.start_time) for c in classes],
                checkin_time,
            )
            failed = [r.class_id for r in results if r.status == MarkStatus.FAILED]
            if failed:
                # Raising inside the transaction rolls back the rows already restored.
                raise StoreError(f"Could not restore classes {', '.join(failed)}")

        return sum(1 for r in results if r.status == MarkStatus.MARKED)
