"""
Set complement for the "available to enroll" view.

available = all profiles with role "student" - students enrolled in the course
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, TypeVar


T = TypeVar("T")


def enrolled_ids(enrollments: Iterable[Any]) -> frozenset[str]:
    return frozenset(str(e.student_id) for e in enrollments)


def available_students(universe: Iterable[T], enrolled: Iterable[str]) -> List[T]:
    """Members of `universe` whose id is not in `enrolled`, in universe order.

    An empty `enrolled` yields the whole universe.
    """
    excluded = frozenset(str(i) for i in enrolled)
    return [member for member in universe if str(member.id) not in excluded]  # type: ignore[attr-defined]


def exclusion_filters(enrolled: Iterable[str], *, field: str = "id") -> Dict[str, Any]:
    """Backend filter excluding `enrolled` ids; empty when there is nothing to exclude."""
    ids = sorted({str(i) for i in enrolled})
    if not ids:
        return {}
    return {field: ("not_in", ids)}


__all__ = ["available_students", "enrolled_ids", "exclusion_filters"]
