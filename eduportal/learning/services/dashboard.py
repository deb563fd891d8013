"""Student dashboard use cases.

`load()` fetches the student's enrollments, courses, instructors, assignments,
own submissions and unread messages, then runs them through the joiner,
status deriver and aggregator. `submit_assignment()` validates the answer
before writing it; the caller reloads the dashboard afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional
import logging

from ...identity_access.domain import PermissionDenied, Role, Session
from ...storage.ports import RecordStore, SessionProvider
from ...storage.records import (
    ASSIGNMENTS,
    COURSES,
    ENROLLMENTS,
    MESSAGES,
    PROFILES,
    SUBMISSIONS,
    Assignment,
    Course,
    Enrollment,
    Message,
    Profile,
    Submission,
    fetch,
    parse_record,
)
from ...validation import ValidationError, collect_errors, validate_text
from ...views.dashboard import student_summary
from ...views.joiner import (
    PickStrategy,
    join_assignments_with_submissions,
    join_enrollments_with_courses,
    pick_first,
)
from ...views.models import AssignmentView, CourseView, DashboardSummary


logger = logging.getLogger("eduportal.learning")

SUBMISSION_MAX_LENGTH = 5000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StudentDashboard:
    courses: List[CourseView]
    assignments: List[AssignmentView]
    summary: DashboardSummary


@dataclass
class StudentDashboardService:
    store: RecordStore
    sessions: SessionProvider
    pick: PickStrategy = pick_first
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def _require_student(self) -> Session:
        session = await self.sessions.current_session()
        if session is None or session.role is not Role.STUDENT:
            raise PermissionDenied("student_session_required")
        return session

    async def load(self) -> StudentDashboard:
        session = await self._require_student()
        enrollments = await fetch(self.store, Enrollment, ENROLLMENTS, {"student_id": session.user_id})
        course_ids = sorted({e.course_id for e in enrollments})
        courses = await fetch(self.store, Course, COURSES, {"id": ("in", course_ids)})
        instructor_ids = sorted({c.instructor_id for c in courses if c.instructor_id})
        instructors = await fetch(self.store, Profile, PROFILES, {"id": ("in", instructor_ids)})
        assignments = await fetch(self.store, Assignment, ASSIGNMENTS, {"course_id": ("in", course_ids)})
        submissions = await fetch(
            self.store,
            Submission,
            SUBMISSIONS,
            {"student_id": session.user_id, "assignment_id": ("in", [a.id for a in assignments])},
        )
        unread = await fetch(self.store, Message, MESSAGES, {"recipient_id": session.user_id, "read": False})

        course_views = join_enrollments_with_courses(enrollments, courses, instructors)
        assignment_views = join_assignments_with_submissions(assignments, courses, submissions, pick=self.pick)
        summary = student_summary(course_views, assignment_views, unread_message_count=len(unread))
        logger.debug(
            "dashboard loaded: %s courses, %s assignments", summary.course_count, summary.assignment_count
        )
        return StudentDashboard(courses=course_views, assignments=assignment_views, summary=summary)

    async def submit_assignment(self, assignment_id: str, content: Optional[str]) -> Submission:
        session = await self._require_student()
        content_result = validate_text(content, SUBMISSION_MAX_LENGTH)
        errors = collect_errors(content=content_result)
        if errors:
            raise ValidationError(errors)
        if not assignment_id:
            raise LookupError("assignment_not_found")
        assignments = await fetch(self.store, Assignment, ASSIGNMENTS, {"id": assignment_id})
        if not assignments:
            raise LookupError("assignment_not_found")
        enrollments = await fetch(
            self.store,
            Enrollment,
            ENROLLMENTS,
            {"student_id": session.user_id, "course_id": assignments[0].course_id},
        )
        if not enrollments:
            raise LookupError("assignment_not_found")
        row = await self.store.insert(
            SUBMISSIONS,
            {
                "assignment_id": assignment_id,
                "student_id": session.user_id,
                "content": content_result.sanitized_value,
                "submitted_at": self.clock().isoformat(),
            },
        )
        submission = parse_record(Submission, row, collection=SUBMISSIONS)
        logger.info("submission %s stored", submission.id)
        return submission


__all__ = ["StudentDashboard", "StudentDashboardService"]
