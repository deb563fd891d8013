"""Input sanitizing and field validation for user-submitted forms."""

from .sanitize import sanitize
from .validators import (
    ValidationError,
    ValidationResult,
    collect_errors,
    validate_email,
    validate_password,
    validate_text,
)

__all__ = [
    "sanitize",
    "ValidationError",
    "ValidationResult",
    "collect_errors",
    "validate_email",
    "validate_password",
    "validate_text",
]
