from __future__ import annotations

import pytest

from src.attendance_bot.attendance_bot.stats.model import CourseAttendance


@pytest.mark.parametrize(
    "attended, total, expected",
    [
        (9, 12, 75.0),
        (2, 3, 66.7),
        (1, 3, 33.3),
        (0, 0, 0.0),
        (5, 5, 100.0),
    ],
)
def test_percentage_is_rounded_to_one_decimal(attended, total, expected):
    course = CourseAttendance(course_id="MA101", course_name="Maths", is_lab=False, attended=attended, total=total)
    assert course.percentage == expected


def test_status_command_lists_courses(send):
    ctx = send("/s")

    assert len(ctx.replies) == 1
    text, _ = ctx.replies[0]
    assert "Mathematics" in text
    assert "9 / 12 (75%)" in text


def test_status_command_reports_store_failure(send, container):
    container.course_attendance_repo.fail = True
    ctx = send("/status")

    assert ctx.replies[-1][0].startswith("Couldn't load your attendance data")
