from __future__ import annotations

from datetime import date
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..bot.formatters import format_day, md
from ..common.datetime_utils import format_hhmm
from ..schedules.model import ClassRecord
from ..stats.model import CourseAttendance
from .model import PendingReminder

REMINDERS_ON = "Class reminders enabled. You'll be notified 10 minutes before each class."
REMINDERS_OFF = "Class reminders disabled."
DAILY_BRIEF_ON = "Daily brief enabled. You'll receive a morning summary at 8:00 AM."
DAILY_BRIEF_OFF = "Daily brief disabled."


def format_class_reminder(reminder: PendingReminder, tz: ZoneInfo) -> str:
    text = f"⏰ *Class Reminder*\n\n*{md(reminder.course_name)}* starts at {format_hhmm(reminder.start_time, tz)}."
    if reminder.venue:
        text += f"\n📍 {md(reminder.venue)}"
    return text


def format_daily_brief(
    brief_date: date,
    classes: Sequence[ClassRecord],
    courses: Optional[Sequence[CourseAttendance]],
    tz: ZoneInfo,
) -> str:
    """Morning summary. `courses` is None when attendance could not be loaded."""

    lines = [f"Good morning. Here's your brief for {format_day(brief_date)}.", ""]

    lines.append("Today's classes:")
    if classes:
        for cls in classes:
            venue = f" • {md(cls.venue)}" if cls.venue else ""
            lines.append(f"- {md(cls.course_name)} @ {format_hhmm(cls.start_time, tz)}{venue}")
    else:
        lines.append("No classes today.")

    lines.append("")
    if courses is None:
        lines.append("Attendance data unavailable right now.")
    else:
        lines.append("Your attendance:")
        for course in courses:
            lab_tag = " 🧪" if course.is_lab else ""
            lines.append(
                f"{md(course.course_name)}{lab_tag}: {course.attended}/{course.total} ({course.percentage:g}%)"
            )
        if not courses:
            lines.append("No courses found.")

    lines.extend(["", "Keep it up.", "", "_Updates in real-time as you mark attendance._"])
    return "\n".join(lines)
