"""Teaching courses service layer (teacher dashboard use cases).

Why:
    Encapsulates course-related use cases (create course, roster, available
    students, enrollment, assignments, summary) so the presentation layer only
    renders what comes back. Input is validated and sanitized before any write;
    views are rebuilt from fresh records after every mutation by the caller.

Errors:
    PermissionDenied  no session or not a teacher
    LookupError       course/student not found for this teacher
    ValidationError   per-field form errors
    ValueError        "already_enrolled"
    BackendError      propagated unchanged from the store
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
import logging

from ...identity_access.domain import PermissionDenied, Role, Session
from ...security import security_log
from ...storage.ports import RecordStore, SessionProvider
from ...storage.records import (
    ASSIGNMENTS,
    COURSES,
    ENROLLMENTS,
    MESSAGES,
    PROFILES,
    Assignment,
    Course,
    Enrollment,
    Message,
    Profile,
    fetch,
    parse_record,
)
from ...validation import ValidationError, collect_errors, validate_text
from ...views.availability import available_students, enrolled_ids, exclusion_filters
from ...views.dashboard import teacher_summary
from ...views.joiner import (
    join_courses_with_enrollment_counts,
    join_enrollments_with_students,
    profiles_as_students,
)
from ...views.models import StudentView, TeacherCourseView, TeacherSummary


logger = logging.getLogger("eduportal.teaching")

COURSE_TITLE_MAX_LENGTH = 100
COURSE_DESCRIPTION_MAX_LENGTH = 500
ASSIGNMENT_TITLE_MAX_LENGTH = 200
ASSIGNMENT_DESCRIPTION_MAX_LENGTH = 2000


def _parse_due_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("invalid_due_date")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise ValueError("invalid_due_date") from exc


@dataclass
class CoursesService:
    """Use cases for a teacher's courses (framework-independent)."""

    store: RecordStore
    sessions: SessionProvider
    description_max_length: int = COURSE_DESCRIPTION_MAX_LENGTH

    async def _require_teacher(self) -> Session:
        session = await self.sessions.current_session()
        if session is None or session.role is not Role.TEACHER:
            raise PermissionDenied("teacher_session_required")
        return session

    async def _own_course(self, session: Session, course_id: str) -> Course:
        if not course_id:
            raise LookupError("course_not_found")
        courses = await fetch(
            self.store, Course, COURSES, {"id": course_id, "instructor_id": session.user_id}
        )
        if not courses:
            raise LookupError("course_not_found")
        return courses[0]

    async def _course_enrollments(self, course_id: str) -> List[Enrollment]:
        return await fetch(self.store, Enrollment, ENROLLMENTS, {"course_id": course_id})

    async def create_course(self, title: Optional[str], description: Optional[str]) -> Course:
        session = await self._require_teacher()
        title_result = validate_text(title, COURSE_TITLE_MAX_LENGTH)
        description_result = validate_text(description, self.description_max_length)
        errors = collect_errors(title=title_result, description=description_result)
        if errors:
            raise ValidationError(errors)
        row = await self.store.insert(
            COURSES,
            {
                "title": title_result.sanitized_value,
                "description": description_result.sanitized_value,
                "instructor_id": session.user_id,
            },
        )
        course = parse_record(Course, row, collection=COURSES)
        security_log("Course created", teacher_id=session.user_id, course_id=course.id)
        return course

    async def list_courses(self) -> List[TeacherCourseView]:
        session = await self._require_teacher()
        courses = await fetch(self.store, Course, COURSES, {"instructor_id": session.user_id})
        enrollments = await fetch(
            self.store, Enrollment, ENROLLMENTS, {"course_id": ("in", [c.id for c in courses])}
        )
        return join_courses_with_enrollment_counts(courses, enrollments)

    async def list_course_students(self, course_id: str) -> List[StudentView]:
        session = await self._require_teacher()
        await self._own_course(session, course_id)
        enrollments = await self._course_enrollments(course_id)
        profiles = await fetch(
            self.store, Profile, PROFILES, {"id": ("in", sorted(enrolled_ids(enrollments)))}
        )
        return join_enrollments_with_students(enrollments, profiles)

    async def list_available_students(self, course_id: str) -> List[StudentView]:
        """Students (role "student") not yet enrolled in `course_id`."""
        session = await self._require_teacher()
        await self._own_course(session, course_id)
        enrolled = enrolled_ids(await self._course_enrollments(course_id))
        filters = {"role": Role.STUDENT.value, **exclusion_filters(enrolled)}
        universe = await fetch(self.store, Profile, PROFILES, filters)
        # The backend already excludes enrolled ids; the local complement keeps
        # the result correct for stores that ignore the exclusion filter.
        return profiles_as_students(available_students(universe, enrolled))

    async def enroll_student(self, course_id: str, student_id: str) -> Enrollment:
        session = await self._require_teacher()
        await self._own_course(session, course_id)
        if not student_id:
            raise LookupError("student_not_found")
        students = await fetch(
            self.store, Profile, PROFILES, {"id": student_id, "role": Role.STUDENT.value}
        )
        if not students:
            raise LookupError("student_not_found")
        if student_id in enrolled_ids(await self._course_enrollments(course_id)):
            raise ValueError("already_enrolled")
        row = await self.store.insert(
            ENROLLMENTS, {"course_id": course_id, "student_id": student_id, "progress": 0}
        )
        enrollment = parse_record(Enrollment, row, collection=ENROLLMENTS)
        security_log("Student enrolled", teacher_id=session.user_id, course_id=course_id, student_id=student_id)
        return enrollment

    async def create_assignment(
        self,
        course_id: str,
        title: Optional[str],
        description: Optional[str] = None,
        due_date: object = None,
    ) -> Assignment:
        session = await self._require_teacher()
        await self._own_course(session, course_id)
        title_result = validate_text(title, ASSIGNMENT_TITLE_MAX_LENGTH)
        errors = collect_errors(title=title_result)
        sanitized_description = ""
        if description:
            description_result = validate_text(description, ASSIGNMENT_DESCRIPTION_MAX_LENGTH)
            errors.update(collect_errors(description=description_result))
            sanitized_description = description_result.sanitized_value
        try:
            due = _parse_due_date(due_date)
        except ValueError:
            errors["due_date"] = "Please enter a valid date (YYYY-MM-DD)"
        if errors:
            raise ValidationError(errors)
        row = await self.store.insert(
            ASSIGNMENTS,
            {
                "course_id": course_id,
                "title": title_result.sanitized_value,
                "description": sanitized_description,
                "due_date": due.isoformat() if due else None,
            },
        )
        assignment = parse_record(Assignment, row, collection=ASSIGNMENTS)
        logger.info("assignment %s created", assignment.id)
        return assignment

    async def summary(self) -> TeacherSummary:
        session = await self._require_teacher()
        courses = await self.list_courses()
        assignments = await fetch(
            self.store, Assignment, ASSIGNMENTS, {"course_id": ("in", [c.id for c in courses])}
        )
        unread = await fetch(
            self.store, Message, MESSAGES, {"recipient_id": session.user_id, "read": False}
        )
        return teacher_summary(courses, assignment_count=len(assignments), unread_message_count=len(unread))


def build_courses_service(store: RecordStore, sessions: SessionProvider, config) -> CoursesService:
    """Wire `CoursesService` with the free-text limit from a `PortalConfig`."""
    return CoursesService(store=store, sessions=sessions, description_max_length=config.text_max_length)


__all__ = ["CoursesService", "build_courses_service"]
