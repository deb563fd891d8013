"""
Teacher dashboard use cases against the in-memory store.

Covers the permission gate, sanitized writes, course ownership, the
available-students complement and the summary figures.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from eduportal.config import load_config
from eduportal.identity_access.domain import PermissionDenied
from eduportal.storage.ports import BackendError
from eduportal.teaching.services.courses import CoursesService, build_courses_service
from eduportal.validation import ValidationError

from fakes import student, teacher


@pytest.fixture
def service(store, sessions) -> CoursesService:
    sessions.session = teacher()
    return CoursesService(store=store, sessions=sessions)


@pytest.mark.anyio
async def test_requires_teacher_session(store, sessions) -> None:
    svc = CoursesService(store=store, sessions=sessions)
    with pytest.raises(PermissionDenied):
        await svc.list_courses()
    sessions.session = student()
    with pytest.raises(PermissionDenied):
        await svc.create_course("Intro", "ok")
    assert store.inserts == []


@pytest.mark.anyio
async def test_create_course_writes_sanitized_values(service, store) -> None:
    course = await service.create_course("<script>x</script>Intro", "ok")
    assert store.inserts == [
        ("courses", {"title": "Intro", "description": "ok", "instructor_id": "teacher-1"})
    ]
    assert course.title == "Intro"
    assert course.instructor_id == "teacher-1"


@pytest.mark.anyio
async def test_create_course_reports_field_errors_without_writing(service, store) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await service.create_course("<script>x</script>", "x" * 501)
    assert excinfo.value.errors == {
        "title": "Invalid content detected",
        "description": "Text must be 500 characters or less",
    }
    assert store.inserts == []


@pytest.mark.anyio
async def test_list_courses_counts_enrollments(service) -> None:
    rows = await service.list_courses()
    assert [(r.id, r.title, r.student_count) for r in rows] == [
        ("course-1", "Introduction to React", 2),
        ("course-2", "Advanced JavaScript", 0),
    ]


@pytest.mark.anyio
async def test_list_course_students_derives_display_email(service) -> None:
    rows = await service.list_course_students("course-1")
    assert [(r.id, r.full_name, r.derived_email) for r in rows] == [
        ("student-1", "Ada Lovelace", "ada.lovelace@student.com"),
        ("student-2", "Bob  Smith", "bob.smith@student.com"),
    ]


@pytest.mark.anyio
async def test_other_teachers_course_is_not_found(service, store) -> None:
    with pytest.raises(LookupError, match="course_not_found"):
        await service.list_course_students("course-3")
    with pytest.raises(LookupError, match="course_not_found"):
        await service.enroll_student("course-3", "student-3")
    assert store.inserts == []


@pytest.mark.anyio
async def test_available_students_excludes_enrolled(service, store) -> None:
    rows = await service.list_available_students("course-1")
    assert [(r.id, r.full_name, r.derived_email) for r in rows] == [
        ("student-3", "Unknown", "unknown@student.com")
    ]
    assert store.queried("profiles")[-1] == {"role": "student", "id": ("not_in", ["student-1", "student-2"])}


@pytest.mark.anyio
async def test_available_students_with_no_enrollments_sends_no_exclusion(service, store) -> None:
    rows = await service.list_available_students("course-2")
    assert [r.id for r in rows] == ["student-1", "student-2", "student-3"]
    assert store.queried("profiles")[-1] == {"role": "student"}


@pytest.mark.anyio
async def test_enroll_student_then_roster_and_complement_update(service, store) -> None:
    enrollment = await service.enroll_student("course-2", "student-3")
    assert enrollment.progress == 0
    assert store.inserts[-1] == (
        "enrollments",
        {"course_id": "course-2", "student_id": "student-3", "progress": 0},
    )
    roster = await service.list_course_students("course-2")
    assert [r.id for r in roster] == ["student-3"]
    available = await service.list_available_students("course-2")
    assert [r.id for r in available] == ["student-1", "student-2"]


@pytest.mark.anyio
async def test_enroll_student_rejects_duplicates_and_non_students(service, store) -> None:
    with pytest.raises(ValueError, match="already_enrolled"):
        await service.enroll_student("course-1", "student-1")
    with pytest.raises(LookupError, match="student_not_found"):
        await service.enroll_student("course-1", "teacher-2")
    with pytest.raises(LookupError, match="student_not_found"):
        await service.enroll_student("course-1", "")
    assert store.inserts == []


@pytest.mark.anyio
async def test_create_assignment(service, store) -> None:
    assignment = await service.create_assignment("course-2", " Recursion <b>drill</b> ", "Write it", "2024-03-01")
    assert store.inserts[-1] == (
        "assignments",
        {"course_id": "course-2", "title": "Recursion drill", "description": "Write it", "due_date": "2024-03-01"},
    )
    assert assignment.due_date == date(2024, 3, 1)


@pytest.mark.anyio
async def test_create_assignment_without_optional_fields(service, store) -> None:
    await service.create_assignment("course-1", "Reading")
    assert store.inserts[-1][1]["description"] == ""
    assert store.inserts[-1][1]["due_date"] is None


@pytest.mark.anyio
async def test_create_assignment_rejects_bad_input(service, store) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await service.create_assignment("course-1", "", None, "next tuesday")
    assert excinfo.value.errors == {
        "title": "This field is required",
        "due_date": "Please enter a valid date (YYYY-MM-DD)",
    }
    assert store.inserts == []


@pytest.mark.anyio
async def test_summary(service) -> None:
    summary = await service.summary()
    assert (summary.course_count, summary.total_students, summary.assignment_count, summary.unread_message_count) == (
        2,
        2,
        3,
        1,
    )


@pytest.mark.anyio
async def test_backend_errors_propagate(service, store) -> None:
    store.fail_with = "backend_query_failed"
    with pytest.raises(BackendError) as excinfo:
        await service.list_courses()
    assert excinfo.value.message == "backend_query_failed"


@pytest.mark.anyio
async def test_configured_text_limit_bounds_course_description(store, sessions) -> None:
    sessions.session = teacher()
    svc = build_courses_service(store, sessions, load_config({"TEXT_MAX_LENGTH": "10"}))
    with pytest.raises(ValidationError) as excinfo:
        await svc.create_course("Intro", "x" * 11)
    assert excinfo.value.errors == {"description": "Text must be 10 characters or less"}
    await svc.create_course("Intro", "x" * 10)
    assert store.inserts[-1][1]["description"] == "x" * 10


@pytest.mark.anyio
async def test_datetime_due_date_is_stored_as_calendar_day(service, store) -> None:
    await service.create_assignment(
        "course-1", "Reading", None, datetime(2024, 3, 1, 23, 30, tzinfo=timezone.utc)
    )
    assert store.inserts[-1][1]["due_date"] == "2024-03-01"
