from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import AsyncContextManager, Callable
from zoneinfo import ZoneInfo

from telegram import Bot

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .bot.session import open_bot
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.mysql_settings_repository import MySQLUserSettingsRepository
from .notifications.service import NotificationService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .stats.mysql_stats_repository import MySQLCourseAttendanceRepository
from .stats.service import StatsService
from .undo.audit import ActionAuditLogger
from .undo.mysql_action_repository import MySQLActionLogRepository
from .undo.service import UndoService
from .users.mysql_link_repository import MySQLTelegramLinkRepository
from .users.service import AccountService


@dataclass(frozen=True)
class BotSettings:
    bot_token: str
    tz: ZoneInfo
    app_base_url: str
    webhook_secret: str | None = None
    # Shared with the external scheduler that POSTs /jobs/<name>; unset disables jobs.
    job_secret: str | None = None


@dataclass(frozen=True)
class Container:
    """Everything a request handler needs, built once at process start."""

    settings: BotSettings
    conn: DatabaseConnection

    links_repo: MySQLTelegramLinkRepository
    schedules_repo: MySQLScheduleRepository
    attendance_repo: MySQLAttendanceRepository
    actions_repo: MySQLActionLogRepository
    course_attendance_repo: MySQLCourseAttendanceRepository
    settings_repo: MySQLUserSettingsRepository
    notification_repo: MySQLNotificationRepository

    account_service: AccountService
    attendance_service: AttendanceService
    audit_logger: ActionAuditLogger
    schedule_service: ScheduleService
    undo_service: UndoService
    stats_service: StatsService
    notification_service: NotificationService

    bot_session: Callable[[], AsyncContextManager[Bot]]


def build_container(
    *,
    db_config: dict,
    bot_token: str,
    timezone: str = DEFAULT_TIMEZONE,
    app_base_url: str,
    webhook_secret: str | None = None,
    job_secret: str | None = None,
) -> Container:
    settings = BotSettings(
        bot_token=bot_token,
        tz=ZoneInfo(timezone),
        app_base_url=app_base_url,
        webhook_secret=webhook_secret or None,
        job_secret=job_secret or None,
    )
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    links_repo = MySQLTelegramLinkRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    actions_repo = MySQLActionLogRepository(conn)
    course_attendance_repo = MySQLCourseAttendanceRepository(conn)
    settings_repo = MySQLUserSettingsRepository(conn)
    notification_repo = MySQLNotificationRepository(conn)

    account_service = AccountService(links_repo, app_base_url=app_base_url)
    audit_logger = ActionAuditLogger(actions_repo)
    attendance_service = AttendanceService(attendance_repo, audit_logger, tz=settings.tz)
    schedule_service = ScheduleService(schedules_repo, attendance_service, tz=settings.tz)
    undo_service = UndoService(actions_repo, attendance_repo, schedules_repo, tz=settings.tz)
    stats_service = StatsService(course_attendance_repo)
    notification_service = NotificationService(
        settings_repo, notification_repo, schedule_service, stats_service, tz=settings.tz
    )

    return Container(
        settings=settings,
        conn=conn,
        links_repo=links_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        actions_repo=actions_repo,
        course_attendance_repo=course_attendance_repo,
        settings_repo=settings_repo,
        notification_repo=notification_repo,
        account_service=account_service,
        attendance_service=attendance_service,
        audit_logger=audit_logger,
        schedule_service=schedule_service,
        undo_service=undo_service,
        stats_service=stats_service,
        notification_service=notification_service,
        bot_session=partial(open_bot, bot_token),
    )
