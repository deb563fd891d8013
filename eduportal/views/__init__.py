"""
Derived view state for the dashboards.

Everything here is synchronous and side-effect free: raw records go in,
view rows and summary figures come out.
"""

from .availability import available_students, exclusion_filters
from .dashboard import mean, student_summary, teacher_summary
from .joiner import (
    join_assignments_with_submissions,
    join_enrollments_with_courses,
    join_enrollments_with_students,
    pick_first,
    pick_most_recent,
)
from .models import AssignmentView, CourseView, DashboardSummary, StudentView, TeacherSummary
from .status import AssignmentStatus, CourseStatus, assignment_status, course_status

__all__ = [
    "available_students",
    "exclusion_filters",
    "mean",
    "student_summary",
    "teacher_summary",
    "join_assignments_with_submissions",
    "join_enrollments_with_courses",
    "join_enrollments_with_students",
    "pick_first",
    "pick_most_recent",
    "AssignmentView",
    "CourseView",
    "DashboardSummary",
    "StudentView",
    "TeacherSummary",
    "AssignmentStatus",
    "CourseStatus",
    "assignment_status",
    "course_status",
]
