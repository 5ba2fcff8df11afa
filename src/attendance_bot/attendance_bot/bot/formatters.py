from __future__ import annotations

from datetime import date
from typing import Sequence
from zoneinfo import ZoneInfo

from telegram.helpers import escape_markdown

from ..attendance.model import IndexedMarkResult
from ..common.datetime_utils import format_hhmm
from ..core.enums import MarkStatus
from ..schedules.model import ClassRecord, ScheduleEntry
from ..stats.model import CourseAttendance

UNDO_HINT = "_Use /undo to revert if needed._"

HELP_TEXT = """
*Attendance Bot Help*

I help you track attendance and view your class schedule.

*Attendance*
/attend – Mark present (tap classes or type numbers)
/attend\\_all – Mark all classes present for today
/absent – Mark absent (tap classes or type numbers)
/absent\\_all – Mark all classes absent for today

*Schedule & Info*
/today – View today's schedule
/tomorrow – View tomorrow's schedule
/status – Check your attendance by course

*Notifications*
/remind\\_me – Toggle reminders 10 minutes before each class
/daily\\_brief – Toggle the morning summary

*Account & Recovery*
/undo – Revert your last attendance action (today only)
/reset – Disconnect and reconnect your account

*Quick Access*
/shortcuts – View shorter command aliases

*Examples:*
/attend → Shows buttons for all classes
/attend 1 3 5 → Mark classes 1, 3, and 5 present
""".strip()

SHORTCUTS_TEXT = """
*Quick Shortcuts*

*Attendance*
/a → /attend
/aa → /attend\\_all
/ab → /absent

*Info*
/s → /status
/u → /undo

*Examples:*
/a 1 2 → Mark classes 1 and 2 present
/aa → Mark all classes present
""".strip()


def md(text: str) -> str:
    return escape_markdown(text or "", version=1)


def plural(count: int, singular: str = "class", many: str = "classes") -> str:
    return singular if count == 1 else many


def format_day(value: date) -> str:
    return f"{value.day}/{value.month}/{value.year}"


def format_schedule(
    title: str,
    class_date: date,
    items: Sequence[ClassRecord | ScheduleEntry],
    *,
    tz: ZoneInfo,
) -> str:
    lines = [f"*{title} ({format_day(class_date)})*", ""]

    for position, item in enumerate(items, start=1):
        if isinstance(item, ScheduleEntry):
            cls, mark = item.record, (" ✅" if item.is_marked else " ⏸️")
        else:
            cls, mark = item, ""

        lines.append(f"{position}. *{md(cls.course_name)}*{mark}")
        lines.append(f"   ⏰ {format_hhmm(cls.start_time, tz)} - {format_hhmm(cls.end_time, tz)}")
        if cls.venue:
            lines.append(f"   📍 {md(cls.venue)}")
        lines.append("")

    return "\n".join(lines).strip()


def count_statuses(results: Sequence[IndexedMarkResult]) -> dict[MarkStatus, int]:
    counts = {status: 0 for status in MarkStatus}
    for r in results:
        counts[r.status] += 1
    return counts


def format_mark_summary(results: Sequence[IndexedMarkResult]) -> str:
    counts = count_statuses(results)
    marked = counts[MarkStatus.MARKED]

    summary = f"Marked {marked} {plural(marked)} present"
    if counts[MarkStatus.ALREADY]:
        summary += f" ({counts[MarkStatus.ALREADY]} already marked)"

    if counts[MarkStatus.FAILED]:
        details = []
        for r in results:
            label = {
                MarkStatus.MARKED: "Marked ✅",
                MarkStatus.ALREADY: "Already marked ✓",
                MarkStatus.FAILED: "Failed ❌",
            }[r.status]
            details.append(f"{r.index}. {md(r.course_name)} - {label}")
        summary += "\n\n" + "\n".join(details)

    return f"{summary}\n\n{UNDO_HINT}"


def format_absent_summary(count: int) -> str:
    return f"Marked {count} {plural(count)} absent.\n\n{UNDO_HINT}"


def format_course_attendance(courses: Sequence[CourseAttendance]) -> str:
    lines = ["*Your Attendance*", ""]
    for course in courses:
        lab_tag = " 🧪" if course.is_lab else ""
        lines.append(f"{md(course.course_name)}{lab_tag}")
        lines.append(f"  {course.attended} / {course.total} ({course.percentage:g}%)")
        lines.append("")
    lines.append("_Updated in real-time as you mark attendance._")
    return "\n".join(lines)
