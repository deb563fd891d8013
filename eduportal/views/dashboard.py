"""Pure reductions of view rows into dashboard summary figures."""
from __future__ import annotations

from typing import Iterable, Sequence, Union

from .models import CourseView, DashboardSummary, TeacherCourseView, TeacherSummary


Number = Union[int, float]


def count(rows: Iterable[object]) -> int:
    return sum(1 for _ in rows)


def total(values: Iterable[Number]) -> Number:
    return sum(values)


def mean(values: Iterable[Number]) -> float:
    """Arithmetic mean; 0 for an empty input."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def average_progress(courses: Sequence[CourseView]) -> float:
    return mean(c.progress for c in courses)


def student_summary(
    courses: Sequence[CourseView],
    assignments: Sequence[object],
    unread_message_count: int = 0,
) -> DashboardSummary:
    return DashboardSummary(
        course_count=count(courses),
        assignment_count=count(assignments),
        average_progress=average_progress(courses),
        unread_message_count=unread_message_count,
    )


def teacher_summary(
    courses: Sequence[TeacherCourseView],
    assignment_count: int = 0,
    unread_message_count: int = 0,
) -> TeacherSummary:
    return TeacherSummary(
        course_count=count(courses),
        total_students=int(total(c.student_count for c in courses)),
        assignment_count=assignment_count,
        unread_message_count=unread_message_count,
    )


__all__ = ["count", "total", "mean", "average_progress", "student_summary", "teacher_summary"]
