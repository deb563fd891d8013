"""Derived view rows and summaries. Recomputed on every refresh, never persisted."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .status import AssignmentStatus, CourseStatus


@dataclass(frozen=True)
class CourseView:
    id: str
    title: str
    instructor_name: str
    progress: int
    status: CourseStatus


@dataclass(frozen=True)
class AssignmentView:
    id: str
    title: str
    course_title: str
    due_date: Optional[date]
    status: AssignmentStatus
    grade: Optional[int] = None


@dataclass(frozen=True)
class StudentView:
    id: str
    full_name: str
    derived_email: str
    enrolled_at: Optional[datetime] = None


@dataclass(frozen=True)
class TeacherCourseView:
    id: str
    title: str
    description: str
    student_count: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DashboardSummary:
    course_count: int
    assignment_count: int
    average_progress: float
    unread_message_count: int


@dataclass(frozen=True)
class TeacherSummary:
    course_count: int
    total_students: int
    assignment_count: int
    unread_message_count: int


__all__ = [
    "CourseView",
    "AssignmentView",
    "StudentView",
    "TeacherCourseView",
    "DashboardSummary",
    "TeacherSummary",
]
