"""
Typed backend records, validated where they cross the store boundary.

Why:
    Rows from the backend arrive as loosely shaped dicts. Parsing them into
    these models once means the joiner, deriver and aggregator never see a
    missing key or a wrong type; a row that does not fit is reported as a
    `BackendError` instead of leaking further.

Collections (table names in the backend):
    profiles, courses, enrollments, assignments, submissions, messages
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.functional_validators import field_validator, model_validator

from .ports import BackendError, RecordStore, split_filter


PROFILES = "profiles"
COURSES = "courses"
ENROLLMENTS = "enrollments"
ASSIGNMENTS = "assignments"
SUBMISSIONS = "submissions"
MESSAGES = "messages"


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        # Backends hand out UUIDs or integers; views only ever compare them.
        if v is None:
            return v
        return str(v)


class Profile(_Row):
    full_name: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[datetime] = None


class Course(_Row):
    title: str = ""
    description: str = ""
    instructor_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("instructor_id", mode="before")
    @classmethod
    def _fk_as_str(cls, v):
        return v if v is None else str(v)


class Enrollment(_Row):
    student_id: str
    course_id: str
    progress: int = Field(default=0, ge=0, le=100)
    enrolled_at: Optional[datetime] = None

    @field_validator("student_id", "course_id", mode="before")
    @classmethod
    def _fk_as_str(cls, v):
        return v if v is None else str(v)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress_default(cls, v):
        return 0 if v is None else v


class Assignment(_Row):
    course_id: str
    title: str = ""
    description: str = ""
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @field_validator("course_id", mode="before")
    @classmethod
    def _fk_as_str(cls, v):
        return v if v is None else str(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_part(cls, v):
        # Accept full timestamps for a due date; only the calendar day is shown.
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        if isinstance(v, datetime):
            return v.date()
        return v


class Submission(_Row):
    assignment_id: str
    student_id: str
    content: str = ""
    grade: Optional[int] = Field(default=None, ge=0, le=100)
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None

    @field_validator("assignment_id", "student_id", mode="before")
    @classmethod
    def _fk_as_str(cls, v):
        return v if v is None else str(v)

    @model_validator(mode="after")
    def _graded_rows_carry_a_grade(self):
        if self.graded_at is not None and self.grade is None:
            raise ValueError("graded submission without a grade")
        return self


class Message(_Row):
    recipient_id: str
    sender_id: Optional[str] = None
    read: bool = False

    @field_validator("recipient_id", "sender_id", mode="before")
    @classmethod
    def _fk_as_str(cls, v):
        return v if v is None else str(v)


R = TypeVar("R", bound=_Row)


def parse_records(model: Type[R], rows: Iterable[dict], *, collection: str) -> List[R]:
    """Validate backend rows into `model`; any malformed row raises BackendError."""
    parsed: List[R] = []
    for row in rows or []:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            raise BackendError(f"malformed_record:{collection}") from exc
    return parsed


def parse_record(model: Type[R], row: dict, *, collection: str) -> R:
    return parse_records(model, [row], collection=collection)[0]


async def fetch(
    store: RecordStore,
    model: Type[R],
    collection: str,
    filters: Optional[Mapping[str, Any]] = None,
) -> List[R]:
    """Query `collection` and parse the rows into `model`.

    A membership filter over an empty id list matches nothing, so the backend
    is not asked at all (an empty `in.()` filter is malformed).
    """
    for value in (filters or {}).values():
        op, operand = split_filter(value)
        if op == "in" and not operand:
            return []
    rows = await store.query(collection, filters)
    return parse_records(model, rows, collection=collection)


__all__ = [
    "Profile",
    "Course",
    "Enrollment",
    "Assignment",
    "Submission",
    "Message",
    "parse_records",
    "parse_record",
    "fetch",
    "PROFILES",
    "COURSES",
    "ENROLLMENTS",
    "ASSIGNMENTS",
    "SUBMISSIONS",
    "MESSAGES",
]
