"""
Security logging helpers.

Log records about throttling and rejected input must never carry raw user
identifiers. `security_log` hashes the known sensitive fields before handing
them to the standard logging machinery.
"""
from __future__ import annotations

from typing import Any
import hashlib
import logging

logger = logging.getLogger("eduportal.security")

SENSITIVE_FIELDS = ("user_id", "student_id", "email", "course_id", "teacher_id", "key")


def hash_id(value: str) -> str:
    """Return the first 8 hex chars of the SHA-256 of `value` ("NONE" when empty)."""
    if not value:
        return "NONE"
    return hashlib.sha256(value.encode()).hexdigest()[:8]


def security_log(message: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Log `message` with sensitive fields replaced by `<field>_hash`."""
    safe = dict(fields)
    for field in SENSITIVE_FIELDS:
        if field in safe:
            safe[f"{field}_hash"] = hash_id(str(safe.pop(field)))
    logger.log(level, message, extra=safe)


__all__ = ["hash_id", "security_log", "SENSITIVE_FIELDS"]
