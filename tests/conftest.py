from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.attendance_bot.attendance_bot.attendance.model import (
    AttendanceDelta,
    AttendanceStatusRow,
    DeleteResult,
    MarkResult,
)
from src.attendance_bot.attendance_bot.attendance.service import AttendanceService
from src.attendance_bot.attendance_bot.bot.context import BotContext
from src.attendance_bot.attendance_bot.bot.router import UpdateRouter
from src.attendance_bot.attendance_bot.container import BotSettings, Container
from src.attendance_bot.attendance_bot.core.enums import MarkStatus, NotificationJob
from src.attendance_bot.attendance_bot.core.exceptions import StoreError
from src.attendance_bot.attendance_bot.notifications.model import UserSettings
from src.attendance_bot.attendance_bot.notifications.service import NotificationService
from src.attendance_bot.attendance_bot.schedules.model import ClassRecord, Enrollment
from src.attendance_bot.attendance_bot.schedules.service import ScheduleService
from src.attendance_bot.attendance_bot.stats.model import CourseAttendance
from src.attendance_bot.attendance_bot.stats.service import StatsService
from src.attendance_bot.attendance_bot.undo.audit import ActionAuditLogger
from src.attendance_bot.attendance_bot.undo.model import AttendanceAction
from src.attendance_bot.attendance_bot.undo.service import UndoService
from src.attendance_bot.attendance_bot.users.model import TelegramLink
from src.attendance_bot.attendance_bot.users.service import AccountService

TZ = ZoneInfo("Asia/Kolkata")
CLASS_DAY = date(2026, 3, 2)
USER = "u-1"
CHAT = 4242


def local(hour: int, minute: int = 0, day: date = CLASS_DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)


def make_class(class_id: str, course_id: str, name: str, hour: int, *, day: date = CLASS_DAY, venue=None) -> ClassRecord:
    return ClassRecord(
        class_id=class_id,
        course_id=course_id,
        course_name=name,
        is_lab=name.endswith("Lab"),
        class_date=day,
        start_time=local(hour, day=day).astimezone(timezone.utc),
        end_time=local(hour + 1, day=day).astimezone(timezone.utc),
        batch_id="B1",
        venue=venue,
    )


class InMemoryAttendance:
    """Honours the (user_id, class_id) unique key the way the MySQL table does."""

    def __init__(self):
        self.rows: dict[tuple[str, str], AttendanceDelta] = {}
        self.calls: list[str] = []
        self.bad_class_ids: set[str] = set()
        self.fail_with: Optional[Exception] = None
        self.reverse_results = False

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def mark_bulk(self, *, user_id, class_ids, course_ids, class_times, checkin_time):
        self._enter("mark_bulk")
        results = []
        for class_id, course_id, class_time in zip(class_ids, course_ids, class_times):
            key = (user_id, class_id)
            if class_id in self.bad_class_ids:
                status = MarkStatus.FAILED
            elif key in self.rows:
                status = MarkStatus.ALREADY
            else:
                self.rows[key] = AttendanceDelta(user_id, class_id, course_id, class_time, checkin_time)
                status = MarkStatus.MARKED
            results.append(MarkResult(class_id=class_id, status=status))
        return list(reversed(results)) if self.reverse_results else results

    def delete_bulk(self, *, user_id, class_ids):
        self._enter("delete_bulk")
        results = [DeleteResult(cid, self.rows.pop((user_id, cid), None) is not None) for cid in class_ids]
        return list(reversed(results)) if self.reverse_results else results

    def status_bulk(self, *, user_id, class_ids):
        self._enter("status_bulk")
        return [AttendanceStatusRow(cid, (user_id, cid) in self.rows) for cid in class_ids]

    def restore_bulk(self, *, user_id, classes, checkin_time):
        self._enter("restore_bulk")
        inserted = 0
        for cls in classes:
            key = (user_id, cls.class_id)
            if key not in self.rows:
                self.rows[key] = AttendanceDelta(user_id, cls.class_id, cls.course_id, cls.start_time, checkin_time)
                inserted += 1
        return inserted

    def marked_ids(self, user_id: str = USER) -> set[str]:
        return {cid for (uid, cid) in self.rows if uid == user_id}


class InMemoryActions:
    def __init__(self, clock):
        self._clock = clock
        self._next_id = 1
        self.entries: dict[int, AttendanceAction] = {}
        self.fail_append = False
        self.fail_delete = False

    def append(self, *, user_id, action_type, class_ids):
        if self.fail_append:
            raise StoreError("insert failed")
        action_id = self._next_id
        self._next_id += 1
        self.entries[action_id] = AttendanceAction(
            action_id=action_id,
            user_id=user_id,
            action_type=action_type,
            affected_class_ids=tuple(class_ids),
            created_at=self._clock(),
        )
        return action_id

    def get_latest(self, user_id):
        mine = [a for a in self.entries.values() if a.user_id == user_id]
        if not mine:
            return None
        return max(mine, key=lambda a: (a.created_at, a.action_id))

    def delete(self, action_id):
        if self.fail_delete:
            raise StoreError("delete failed")
        return self.entries.pop(action_id, None) is not None

    def prune_before(self, cutoff):
        old = [k for k, a in self.entries.items() if a.created_at < cutoff]
        for k in old:
            del self.entries[k]
        return len(old)

    def backdate(self, action_id: int, created_at: datetime) -> None:
        self.entries[action_id] = replace(self.entries[action_id], created_at=created_at)


class InMemorySchedules:
    def __init__(self, classes, *, enrollment: Optional[Enrollment] = None):
        self.classes: list[ClassRecord] = list(classes)
        self.enrollments: dict[str, Enrollment] = {}
        if enrollment is not None:
            self.enrollments[enrollment.user_id] = enrollment

    def get_enrollment(self, user_id):
        return self.enrollments.get(user_id)

    def list_for_date(self, *, batch_id, course_ids, class_date):
        found = [
            c for c in self.classes
            if c.batch_id == batch_id and c.course_id in course_ids and c.class_date == class_date
        ]
        return sorted(found, key=lambda c: c.start_time)

    def get_by_ids(self, class_ids):
        by_id = {c.class_id: c for c in self.classes}
        return [by_id[cid] for cid in dict.fromkeys(class_ids) if cid in by_id]


class InMemoryLinks:
    def __init__(self, links=None):
        self.links: dict[int, str] = dict(links or {})

    def get_by_chat_id(self, chat_id):
        user_id = self.links.get(chat_id)
        return TelegramLink(chat_id=chat_id, user_id=user_id) if user_id else None

    def delete(self, chat_id):
        return self.links.pop(chat_id, None) is not None


class InMemoryCourseAttendance:
    def __init__(self, rows=None, *, fail=False):
        self.rows = list(rows or [])
        self.fail = fail

    def get_effective_course_attendance(self, user_id):
        if self.fail:
            raise StoreError("procedure failed")
        return self.rows


class InMemoryUserSettings:
    def __init__(self):
        self.rows: dict[str, UserSettings] = {}

    def get(self, user_id):
        return self.rows.get(user_id, UserSettings(user_id=user_id))

    def toggle(self, user_id, job):
        field = "reminders_enabled" if job == NotificationJob.REMINDERS else "daily_brief_enabled"
        current = self.get(user_id)
        self.rows[user_id] = replace(current, **{field: not getattr(current, field)})
        return getattr(self.rows[user_id], field)


class InMemoryNotifications:
    """Hands each reminder and each (user, day) brief out once, like the log tables."""

    def __init__(self, *, reminders=(), recipients=()):
        self.reminders = list(reminders)
        self.recipients = list(recipients)
        self.reminder_log: set[tuple[str, str]] = set()
        self.brief_log: set[tuple[str, date]] = set()
        self.windows: list[tuple[datetime, datetime]] = []

    def claim_pending_reminders(self, *, window_start, window_end):
        self.windows.append((window_start, window_end))
        claimed = []
        for reminder in self.reminders:
            key = (reminder.user_id, reminder.class_id)
            if window_start < reminder.start_time <= window_end and key not in self.reminder_log:
                self.reminder_log.add(key)
                claimed.append(reminder)
        return claimed

    def claim_brief_recipients(self, brief_date):
        claimed = []
        for recipient in self.recipients:
            key = (recipient.user_id, brief_date)
            if key not in self.brief_log:
                self.brief_log.add(key)
                claimed.append(recipient)
        return claimed


class RecordingContext(BotContext):
    """BotContext that records everything a handler sends back."""

    def __init__(self, *, chat_id=CHAT, text=None, callback_data=None):
        super().__init__(chat_id=chat_id, text=text, callback_data=callback_data)
        self.replies: list[tuple[str, object]] = []
        self.answers: list[tuple[Optional[str], bool]] = []
        self.edits: list[str] = []
        self.markups: list[object] = []
        self.typing_count = 0

    async def reply(self, text, *, reply_markup=None, markdown=False):
        self.replies.append((text, reply_markup))

    async def answer(self, text=None, *, show_alert=False):
        self.answers.append((text, show_alert))

    async def edit_text(self, text, *, markdown=False):
        self.edits.append(text)

    async def edit_markup(self, reply_markup):
        self.markups.append(reply_markup)

    async def typing(self):
        self.typing_count += 1


@pytest.fixture
def fixed_now() -> datetime:
    return local(9, 55)


@pytest.fixture
def classes() -> list[ClassRecord]:
    return [
        make_class("c1", "MA101", "Mathematics", 9, venue="Room 12"),
        make_class("c2", "PH101", "Physics", 11),
        make_class("c3", "CS101", "Programming Lab", 14),
    ]


@pytest.fixture
def clock(fixed_now):
    state = {"now": fixed_now}

    def now():
        return state["now"]

    now.set = lambda value: state.__setitem__("now", value)
    return now


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def actions_repo(clock) -> InMemoryActions:
    return InMemoryActions(clock)


@pytest.fixture
def schedules_repo(classes) -> InMemorySchedules:
    return InMemorySchedules(
        classes,
        enrollment=Enrollment(user_id=USER, batch_id="B1", course_ids=("MA101", "PH101", "CS101")),
    )


@pytest.fixture
def audit(actions_repo) -> ActionAuditLogger:
    return ActionAuditLogger(actions_repo)


@pytest.fixture
def attendance_service(attendance_repo, audit) -> AttendanceService:
    return AttendanceService(attendance_repo, audit, tz=TZ)


@pytest.fixture
def schedule_service(schedules_repo, attendance_service) -> ScheduleService:
    return ScheduleService(schedules_repo, attendance_service, tz=TZ)


@pytest.fixture
def undo_service(actions_repo, attendance_repo, schedules_repo) -> UndoService:
    return UndoService(actions_repo, attendance_repo, schedules_repo, tz=TZ)


@pytest.fixture
def links_repo() -> InMemoryLinks:
    return InMemoryLinks({CHAT: USER})


@pytest.fixture
def course_attendance_repo() -> InMemoryCourseAttendance:
    return InMemoryCourseAttendance(
        [CourseAttendance(course_id="MA101", course_name="Mathematics", is_lab=False, attended=9, total=12)]
    )


@pytest.fixture
def stats_service(course_attendance_repo) -> StatsService:
    return StatsService(course_attendance_repo)


@pytest.fixture
def settings_repo() -> InMemoryUserSettings:
    return InMemoryUserSettings()


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def notification_service(settings_repo, notifications_repo, schedule_service, stats_service) -> NotificationService:
    return NotificationService(settings_repo, notifications_repo, schedule_service, stats_service, tz=TZ)


@pytest.fixture
def container(
    links_repo, schedules_repo, attendance_repo, actions_repo, audit, attendance_service, schedule_service,
    undo_service, course_attendance_repo, stats_service, settings_repo, notifications_repo, notification_service,
) -> Container:
    return Container(
        settings=BotSettings(
            bot_token="123:abc",
            tz=TZ,
            app_base_url="https://app.test/connect",
            webhook_secret="s3cret",
            job_secret="j0b",
        ),
        conn=None,
        links_repo=links_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        actions_repo=actions_repo,
        course_attendance_repo=course_attendance_repo,
        settings_repo=settings_repo,
        notification_repo=notifications_repo,
        account_service=AccountService(links_repo, app_base_url="https://app.test/connect"),
        attendance_service=attendance_service,
        audit_logger=audit,
        schedule_service=schedule_service,
        undo_service=undo_service,
        stats_service=stats_service,
        notification_service=notification_service,
        bot_session=None,
    )


@pytest.fixture
def router(container) -> UpdateRouter:
    from src.attendance_bot.attendance_bot.attendance.controller import register as register_attendance
    from src.attendance_bot.attendance_bot.notifications.controller import register as register_notifications
    from src.attendance_bot.attendance_bot.schedules.controller import register as register_schedules
    from src.attendance_bot.attendance_bot.stats.controller import register as register_stats
    from src.attendance_bot.attendance_bot.undo.controller import register as register_undo
    from src.attendance_bot.attendance_bot.users.controller import register as register_users

    r = UpdateRouter(container.account_service)
    for register in (
        register_users, register_schedules, register_attendance, register_undo, register_stats, register_notifications,
    ):
        register(r, container)
    return r


@pytest.fixture
def tz() -> ZoneInfo:
    return TZ


@pytest.fixture
def at():
    """at(hour, minute=0, day=CLASS_DAY) -> aware local datetime."""
    return local


@pytest.fixture
def class_factory():
    return make_class


@pytest.fixture
def frozen_clock(monkeypatch, fixed_now):
    """Pin "now" for services that read the clock themselves (handlers do)."""

    from src.attendance_bot.attendance_bot.attendance import service as attendance_service_module
    from src.attendance_bot.attendance_bot.notifications import service as notification_service_module
    from src.attendance_bot.attendance_bot.schedules import service as schedule_service_module
    from src.attendance_bot.attendance_bot.undo import service as undo_service_module

    for module in (
        attendance_service_module, schedule_service_module, undo_service_module, notification_service_module,
    ):
        monkeypatch.setattr(module, "now_local", lambda tz: fixed_now.astimezone(tz))
    return fixed_now


@pytest.fixture
def send(router):
    """send("/attend 1") or send(callback_data="select:...") -> the RecordingContext after dispatch."""

    def _send(text=None, *, callback_data=None, chat_id=CHAT) -> RecordingContext:
        ctx = RecordingContext(chat_id=chat_id, text=text, callback_data=callback_data)
        asyncio.run(router.dispatch(ctx))
        return ctx

    return _send


@pytest.fixture
def context_factory():
    return RecordingContext
