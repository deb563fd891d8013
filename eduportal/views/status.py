"""
Lifecycle status classification for dashboard rows.

Pure snapshot classification: no transitions are executed and nothing is
remembered between calls.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from ..storage.records import Submission


COMPLETE_PROGRESS = 100


class CourseStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    # Reserved for scheduling; no rule derives it from data yet.
    UPCOMING = "upcoming"


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    GRADED = "graded"


def course_status(progress: int) -> CourseStatus:
    if progress == COMPLETE_PROGRESS:
        return CourseStatus.COMPLETED
    return CourseStatus.ACTIVE


def assignment_status(submission: Optional[Submission]) -> AssignmentStatus:
    if submission is None:
        return AssignmentStatus.PENDING
    if submission.graded_at is None:
        return AssignmentStatus.SUBMITTED
    return AssignmentStatus.GRADED


def displayed_grade(submission: Optional[Submission]) -> Optional[int]:
    """Grade shown next to an assignment: only once the submission is graded."""
    if assignment_status(submission) is not AssignmentStatus.GRADED:
        return None
    return submission.grade  # type: ignore[union-attr]


__all__ = [
    "CourseStatus",
    "AssignmentStatus",
    "course_status",
    "assignment_status",
    "displayed_grade",
    "COMPLETE_PROGRESS",
]
