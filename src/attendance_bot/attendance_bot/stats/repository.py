from __future__ import annotations

from typing import Protocol, Sequence

from .model import CourseAttendance


class CourseAttendanceRepository(Protocol):
    def get_effective_course_attendance(self, user_id: str) -> Sequence[CourseAttendance]:
        raise NotImplementedError
