"""
Pytest configuration for the eduportal tests.

Why: Force AnyIO to use the asyncio backend and make the shared fakes module
importable regardless of the directory pytest is started from.
"""
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
TESTS_DIR = Path(__file__).resolve().parent
for p in (str(REPO_ROOT), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)

from fakes import FakeClock, FakeSessions, InMemoryStore  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def portal_data() -> dict:
    """A small portal: one teacher with two courses, three students."""
    return {
        "profiles": [
            {"id": "teacher-1", "full_name": "Grace Hopper", "role": "teacher"},
            {"id": "teacher-2", "full_name": "Alan Turing", "role": "teacher"},
            {"id": "student-1", "full_name": "Ada Lovelace", "role": "student"},
            {"id": "student-2", "full_name": "Bob  Smith", "role": "student"},
            {"id": "student-3", "full_name": None, "role": "student"},
        ],
        "courses": [
            {"id": "course-1", "title": "Introduction to React", "description": "Basics", "instructor_id": "teacher-1"},
            {"id": "course-2", "title": "Advanced JavaScript", "description": "Deep dive", "instructor_id": "teacher-1"},
            {"id": "course-3", "title": "Web Design", "description": "Layouts", "instructor_id": "teacher-2"},
        ],
        "enrollments": [
            {"id": "enr-1", "student_id": "student-1", "course_id": "course-1", "progress": 75,
             "enrolled_at": "2024-01-10T08:00:00+00:00"},
            {"id": "enr-2", "student_id": "student-1", "course_id": "course-3", "progress": 100},
            {"id": "enr-3", "student_id": "student-2", "course_id": "course-1", "progress": 45},
        ],
        "assignments": [
            {"id": "asg-1", "course_id": "course-1", "title": "Components Exercise", "due_date": "2024-01-25"},
            {"id": "asg-2", "course_id": "course-1", "title": "Hooks Quiz", "due_date": "2024-01-22T12:00:00+00:00"},
            {"id": "asg-3", "course_id": "course-3", "title": "Design Portfolio", "due_date": None},
            {"id": "asg-4", "course_id": "course-2", "title": "Closures", "due_date": "2024-02-01"},
        ],
        "submissions": [
            {"id": "sub-1", "assignment_id": "asg-2", "student_id": "student-1", "content": "done",
             "submitted_at": "2024-01-21T10:00:00+00:00", "grade": 80, "graded_at": None},
            {"id": "sub-2", "assignment_id": "asg-3", "student_id": "student-1", "content": "portfolio",
             "submitted_at": "2024-01-14T10:00:00+00:00", "grade": 92, "graded_at": "2024-01-16T10:00:00+00:00"},
        ],
        "messages": [
            {"id": "msg-1", "recipient_id": "student-1", "sender_id": "teacher-1", "read": False},
            {"id": "msg-2", "recipient_id": "student-1", "sender_id": "teacher-1", "read": True},
            {"id": "msg-3", "recipient_id": "teacher-1", "sender_id": "student-1", "read": False},
        ],
    }


@pytest.fixture
def store(portal_data) -> InMemoryStore:
    return InMemoryStore(portal_data)


@pytest.fixture
def sessions() -> FakeSessions:
    return FakeSessions()
