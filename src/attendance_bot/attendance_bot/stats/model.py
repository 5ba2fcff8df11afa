from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CourseAttendance:
    """Row returned by get_effective_course_attendance (snapshot + deltas)."""

    course_id: str
    course_name: str
    is_lab: bool
    attended: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(self.attended / self.total * 100, 1)
