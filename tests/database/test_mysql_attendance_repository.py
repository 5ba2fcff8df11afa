from __future__ import annotations

import json
from datetime import datetime, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.attendance_bot.attendance_bot.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.attendance_bot.attendance_bot.core.enums import MarkStatus
from src.attendance_bot.attendance_bot.core.exceptions import StoreError, ValidationError

NOW = datetime(2026, 3, 2, 4, 25, tzinfo=timezone.utc)
EIGHT = [f"c{n}" for n in range(1, 9)]


class StoredResult:
    column_names = ("results",)

    def __init__(self, payload):
        self._payload = payload

    def fetchall(self):
        return [(self._payload,)]


class ScriptedCursor:
    """Plays the bulk procedures against the connection's in-memory rows."""

    def __init__(self, conn):
        self._conn = conn
        self._result = None

    def callproc(self, name, args):
        self._conn.calls.append((name, args))
        if self._conn.fail_with is not None:
            raise self._conn.fail_with
        rows = self._conn.run(name, args)
        payload = json.dumps(rows)
        self._result = payload.encode("utf-8") if self._conn.as_bytes else payload

    def stored_results(self):
        return iter([StoredResult(self._result)])

    def execute(self, sql, params=None):
        self._conn.calls.append((" ".join(sql.split()), params))

    def fetchall(self):
        return []

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, *, existing=(), bad=(), as_bytes=False):
        self.existing = set(existing)
        self.bad = set(bad)
        self.as_bytes = as_bytes
        self.fail_with = None
        self.calls = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def run(self, name, args):
        if name == "mark_attendance_bulk":
            rows = []
            for item in json.loads(args[1]):
                class_id = item["class_id"]
                if class_id in self.bad:
                    status = "failed"
                elif class_id in self.existing:
                    status = "already"
                else:
                    self.existing.add(class_id)
                    status = "marked"
                rows.append({"class_id": class_id, "status": status})
            return rows
        if name == "delete_attendance_bulk":
            rows = []
            for class_id in json.loads(args[1]):
                deleted = class_id in self.existing
                self.existing.discard(class_id)
                rows.append({"class_id": class_id, "deleted": 1 if deleted else 0})
            return rows
        raise AssertionError(f"unexpected procedure {name}")

    def cursor(self, dictionary=True):
        return ScriptedCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class ConnFactory:
    def __init__(self, conn):
        self.conn = conn
        self.connects = 0

    def connect(self):
        self.connects += 1
        return self.conn


def _mark(repo, class_ids):
    return repo.mark_bulk(
        user_id="u-1",
        class_ids=class_ids,
        course_ids=["X"] * len(class_ids),
        class_times=[NOW] * len(class_ids),
        checkin_time=NOW,
    )


def test_mark_bulk_is_one_call_whatever_the_selection_size():
    conn = ScriptedConnection(existing={"c2"})
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    results = _mark(repo, EIGHT)

    assert len(conn.calls) == 1
    assert conn.calls[0][0] == "mark_attendance_bulk"
    assert [r.class_id for r in results] == EIGHT
    assert results[1].status == MarkStatus.ALREADY
    assert {r.status for i, r in enumerate(results) if i != 1} == {MarkStatus.MARKED}
    assert conn.commits == 1


def test_delete_bulk_is_one_call_whatever_the_selection_size():
    conn = ScriptedConnection(existing={"c3", "c5"})
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    results = repo.delete_bulk(user_id="u-1", class_ids=EIGHT)

    assert [name for name, _ in conn.calls] == ["delete_attendance_bulk"]
    assert [r.class_id for r in results if r.deleted] == ["c3", "c5"]
    assert conn.commits == 1


def test_constraint_failure_affects_only_that_class():
    conn = ScriptedConnection(bad={"c1"})
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    results = _mark(repo, ["c1", "c2"])

    assert [r.status for r in results] == [MarkStatus.FAILED, MarkStatus.MARKED]
    assert conn.commits == 1


def test_procedure_result_may_arrive_as_bytes():
    conn = ScriptedConnection(existing={"c1"}, as_bytes=True)
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    assert [r.status for r in _mark(repo, ["c1"])] == [MarkStatus.ALREADY]


def test_unexpected_driver_error_rolls_back_everything():
    conn = ScriptedConnection()
    conn.fail_with = mysql.connector.OperationalError(msg="Lost connection", errno=errorcode.CR_SERVER_LOST)
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    with pytest.raises(StoreError):
        _mark(repo, ["c1", "c2"])

    assert conn.commits == 0
    assert conn.rollbacks == 1
    assert conn.closed


def test_empty_input_opens_no_connection():
    factory = ConnFactory(ScriptedConnection())
    repo = MySQLAttendanceRepository(factory)

    assert _mark(repo, []) == []
    assert repo.delete_bulk(user_id="u-1", class_ids=[]) == []
    assert repo.status_bulk(user_id="u-1", class_ids=[]) == []
    assert repo.restore_bulk(user_id="u-1", classes=[], checkin_time=NOW) == 0
    assert factory.connects == 0


def test_mismatched_columns_are_rejected():
    repo = MySQLAttendanceRepository(ConnFactory(ScriptedConnection()))

    with pytest.raises(ValidationError):
        repo.mark_bulk(user_id="u-1", class_ids=["c1"], course_ids=[], class_times=[NOW], checkin_time=NOW)


def test_times_are_sent_as_naive_utc():
    conn = ScriptedConnection()
    repo = MySQLAttendanceRepository(ConnFactory(conn))

    _mark(repo, ["c1"])

    _, (user_id, payload, checkin) = conn.calls[0]
    assert user_id == "u-1"
    assert checkin == datetime(2026, 3, 2, 4, 25)
    assert json.loads(payload) == [{"class_id": "c1", "course_id": "X", "class_time": "2026-03-02 04:25:00"}]


def test_restore_counts_only_rows_it_inserted(class_factory):
    conn = ScriptedConnection(existing={"c1"})
    repo = MySQLAttendanceRepository(ConnFactory(conn))
    classes = [class_factory("c1", "MA101", "Mathematics", 9), class_factory("c2", "PH101", "Physics", 11)]

    assert repo.restore_bulk(user_id="u-1", classes=classes, checkin_time=NOW) == 1
    assert len(conn.calls) == 1
    assert repo.restore_bulk(user_id="u-1", classes=classes, checkin_time=NOW) == 0


def test_restore_is_all_or_nothing(class_factory):
    conn = ScriptedConnection(bad={"c2"})
    repo = MySQLAttendanceRepository(ConnFactory(conn))
    classes = [class_factory("c1", "MA101", "Mathematics", 9), class_factory("c2", "PH101", "Physics", 11)]

    with pytest.raises(StoreError):
        repo.restore_bulk(user_id="u-1", classes=classes, checkin_time=NOW)

    assert conn.commits == 0
    assert conn.rollbacks == 1
