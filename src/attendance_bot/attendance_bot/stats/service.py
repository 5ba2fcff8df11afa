from __future__ import annotations

from .model import CourseAttendance
from .repository import CourseAttendanceRepository


class StatsService:
    """Course-wise attendance. Always per course, never an overall figure."""

    def __init__(self, courses: CourseAttendanceRepository):
        self._courses = courses

    def get_course_attendance(self, user_id: str) -> list[CourseAttendance]:
        return list(self._courses.get_effective_course_attendance(user_id))
