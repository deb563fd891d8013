"""
Identity domain constants and the session value handed out by the auth provider.

Roles are kept minimal and explicit; the backend decides the role at sign-up
and the core only reads it back from the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


ALLOWED_ROLES = frozenset(r.value for r in Role)


@dataclass(frozen=True)
class Session:
    user_id: str
    role: Role

    @property
    def is_teacher(self) -> bool:
        return self.role is Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT


class PermissionDenied(PermissionError):
    """Raised when a use case runs without a session of the required role."""


def parse_role(value: object) -> Role:
    """Map a stored role string to `Role`; unknown values raise ValueError("invalid_role")."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str) or value.strip().lower() not in ALLOWED_ROLES:
        raise ValueError("invalid_role")
    return Role(value.strip().lower())


__all__ = ["ALLOWED_ROLES", "Role", "Session", "PermissionDenied", "parse_role"]
