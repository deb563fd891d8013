"""
Record joiner: denormalize related backend records into view rows.

Rules:
    - Exactly one view row per primary record; a missing parent never drops
      the row. Fallbacks: names -> "Unknown", titles -> "".
    - One-to-many relations (an assignment's submissions) are collapsed with
      an explicit strategy. `pick_first` keeps the backend's order;
      `pick_most_recent` prefers the latest `submitted_at`.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar
import re

from ..storage.records import Assignment, Course, Enrollment, Profile, Submission
from .models import AssignmentView, CourseView, StudentView, TeacherCourseView
from .status import assignment_status, course_status, displayed_grade


UNKNOWN_NAME = "Unknown"
MISSING_TITLE = ""
STUDENT_EMAIL_DOMAIN = "student.com"

T = TypeVar("T")

PickStrategy = Callable[[Sequence[Submission]], Optional[Submission]]

_WS = re.compile(r"\s+")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def index_by_id(rows: Iterable[T]) -> Dict[str, T]:
    """Map `row.id -> row`; later duplicates do not replace the first one."""
    index: Dict[str, T] = {}
    for row in rows:
        index.setdefault(row.id, row)  # type: ignore[attr-defined]
    return index


def pick_first(submissions: Sequence[Submission]) -> Optional[Submission]:
    return submissions[0] if submissions else None


def pick_most_recent(submissions: Sequence[Submission]) -> Optional[Submission]:
    if not submissions:
        return None

    def _key(sub: Submission) -> datetime:
        ts = sub.submitted_at
        if ts is None:
            return _EPOCH
        return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)

    # max() keeps the first of equal keys, so ties fall back to backend order.
    return max(submissions, key=_key)


def display_name(profile: Optional[Profile]) -> str:
    if profile is None:
        return UNKNOWN_NAME
    name = (profile.full_name or "").strip()
    return name or UNKNOWN_NAME


def derive_email(full_name: str) -> str:
    """Display-only address: "Ada Lovelace" -> "ada.lovelace@student.com"."""
    local = _WS.sub(".", (full_name or "").strip().lower()) or UNKNOWN_NAME.lower()
    return f"{local}@{STUDENT_EMAIL_DOMAIN}"


def join_enrollments_with_courses(
    enrollments: Iterable[Enrollment],
    courses: Iterable[Course],
    profiles: Iterable[Profile] = (),
) -> List[CourseView]:
    """One CourseView per enrollment, with the course title and instructor name."""
    course_index = index_by_id(courses)
    profile_index = index_by_id(profiles)
    rows: List[CourseView] = []
    for enrollment in enrollments:
        course = course_index.get(enrollment.course_id)
        instructor = profile_index.get(course.instructor_id) if course and course.instructor_id else None
        rows.append(
            CourseView(
                id=enrollment.course_id,
                title=course.title if course else MISSING_TITLE,
                instructor_name=display_name(instructor),
                progress=enrollment.progress,
                status=course_status(enrollment.progress),
            )
        )
    return rows


def group_submissions(submissions: Iterable[Submission]) -> Dict[str, List[Submission]]:
    grouped: Dict[str, List[Submission]] = defaultdict(list)
    for submission in submissions:
        grouped[submission.assignment_id].append(submission)
    return grouped


def join_assignments_with_submissions(
    assignments: Iterable[Assignment],
    courses: Iterable[Course],
    submissions: Iterable[Submission],
    *,
    pick: PickStrategy = pick_first,
) -> List[AssignmentView]:
    """One AssignmentView per assignment; its submissions collapse via `pick`."""
    course_index = index_by_id(courses)
    by_assignment = group_submissions(submissions)
    rows: List[AssignmentView] = []
    for assignment in assignments:
        course = course_index.get(assignment.course_id)
        chosen = pick(by_assignment.get(assignment.id, []))
        rows.append(
            AssignmentView(
                id=assignment.id,
                title=assignment.title,
                course_title=course.title if course else MISSING_TITLE,
                due_date=assignment.due_date,
                status=assignment_status(chosen),
                grade=displayed_grade(chosen),
            )
        )
    return rows


def join_enrollments_with_students(
    enrollments: Iterable[Enrollment],
    profiles: Iterable[Profile],
) -> List[StudentView]:
    """Teacher-side roster: one StudentView per enrollment."""
    profile_index = index_by_id(profiles)
    rows: List[StudentView] = []
    for enrollment in enrollments:
        name = display_name(profile_index.get(enrollment.student_id))
        rows.append(
            StudentView(
                id=enrollment.student_id,
                full_name=name,
                derived_email=derive_email(name),
                enrolled_at=enrollment.enrolled_at,
            )
        )
    return rows


def profiles_as_students(profiles: Iterable[Profile]) -> List[StudentView]:
    """StudentView rows for profiles that are not (yet) enrolled anywhere."""
    rows: List[StudentView] = []
    for profile in profiles:
        name = display_name(profile)
        rows.append(StudentView(id=profile.id, full_name=name, derived_email=derive_email(name)))
    return rows


def join_courses_with_enrollment_counts(
    courses: Iterable[Course],
    enrollments: Iterable[Enrollment],
) -> List[TeacherCourseView]:
    counts: Dict[str, int] = defaultdict(int)
    for enrollment in enrollments:
        counts[enrollment.course_id] += 1
    return [
        TeacherCourseView(
            id=course.id,
            title=course.title,
            description=course.description,
            student_count=counts.get(course.id, 0),
            created_at=course.created_at,
        )
        for course in courses
    ]


__all__ = [
    "PickStrategy",
    "pick_first",
    "pick_most_recent",
    "index_by_id",
    "display_name",
    "derive_email",
    "join_enrollments_with_courses",
    "join_assignments_with_submissions",
    "join_enrollments_with_students",
    "join_courses_with_enrollment_counts",
    "profiles_as_students",
    "group_submissions",
    "UNKNOWN_NAME",
    "MISSING_TITLE",
]
