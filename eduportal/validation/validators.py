"""
Field validators for user-submitted form input.

Every validator is total: empty or None input yields a failing
`ValidationResult`, never an exception. Use cases that need to abort on bad
input raise `ValidationError` with the per-field messages collected from the
results (see `collect_errors`).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import re

from .sanitize import sanitize


REQUIRED = "required"
INVALID_CONTENT = "invalid-content"
TOO_LONG = "too-long"
INVALID_EMAIL = "invalid-email"
TOO_SHORT = "too-short"

ERROR_CODES = frozenset({REQUIRED, INVALID_CONTENT, TOO_LONG, INVALID_EMAIL, TOO_SHORT})

DEFAULT_MAX_LENGTH = 500
MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationError(ValueError):
    """Raised by use cases when one or more fields fail validation.

    `errors` maps the field name to a user-facing message.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(", ".join(f"{field}: {msg}" for field, msg in self.errors.items()) or "invalid input")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    sanitized_value: str = ""
    error: Optional[str] = None
    max_length: Optional[int] = None

    @property
    def message(self) -> Optional[str]:
        """Human-readable message for `error`, None when valid."""
        if self.error is None:
            return None
        if self.error == TOO_LONG:
            return f"Text must be {self.max_length} characters or less"
        return _MESSAGES.get(self.error, "Invalid input")


_MESSAGES = {
    REQUIRED: "This field is required",
    INVALID_CONTENT: "Invalid content detected",
    INVALID_EMAIL: "Please enter a valid email address",
    TOO_SHORT: f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
}


def validate_text(text: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> ValidationResult:
    """Require non-empty text, sanitize it and enforce `max_length` on the result."""
    if not text:
        return ValidationResult(is_valid=False, error=REQUIRED)
    sanitized = sanitize(text)
    if not sanitized:
        return ValidationResult(is_valid=False, error=INVALID_CONTENT)
    if len(sanitized) > max_length:
        return ValidationResult(is_valid=False, sanitized_value=sanitized, error=TOO_LONG, max_length=max_length)
    return ValidationResult(is_valid=True, sanitized_value=sanitized)


def validate_email(email: Optional[str]) -> ValidationResult:
    sanitized = sanitize(email)
    if not _EMAIL_RE.match(sanitized):
        return ValidationResult(is_valid=False, sanitized_value=sanitized, error=INVALID_EMAIL)
    return ValidationResult(is_valid=True, sanitized_value=sanitized)


def validate_password(password: Optional[str]) -> ValidationResult:
    # Passwords are never rendered, so they are neither sanitized nor echoed back.
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return ValidationResult(is_valid=False, error=TOO_SHORT)
    return ValidationResult(is_valid=True)


def collect_errors(**results: ValidationResult) -> Dict[str, str]:
    """Fold several field verdicts into `{field: message}` for the failing ones."""
    return {field: str(result.message) for field, result in results.items() if not result.is_valid}


__all__ = [
    "ValidationResult",
    "ValidationError",
    "validate_text",
    "validate_email",
    "validate_password",
    "collect_errors",
    "ERROR_CODES",
    "REQUIRED",
    "INVALID_CONTENT",
    "TOO_LONG",
    "INVALID_EMAIL",
    "TOO_SHORT",
]
