"""Guarded sign-in / sign-up use cases.

Why:
    Both actions are throttled per action key before any input is looked at,
    then validated; only sanitized values reach the auth provider. Passwords
    are passed through untouched.

Errors:
    ThrottleExceeded  -> "too many attempts, try later" notice
    ValidationError   -> inline per-field messages (`errors`)
    BackendError      -> generic failure notice, never retried here
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from ..config import ThrottlePolicy
from ..security import security_log
from ..validation import ValidationError, collect_errors, validate_email, validate_password, validate_text
from .domain import Role, parse_role
from .throttle import RequestThrottle, get_default_throttle


SIGNIN_KEY = "signin"
SIGNUP_KEY = "signup"
FULL_NAME_MAX_LENGTH = 100


class AuthProviderProtocol(Protocol):
    async def sign_in(self, email: str, password: str) -> None:
        ...

    async def sign_up(self, email: str, password: str, *, full_name: str, role: Role) -> None:
        ...


@dataclass
class AuthFlows:
    """Use cases for the auth page (framework-independent)."""

    provider: AuthProviderProtocol
    throttle: RequestThrottle = field(default_factory=get_default_throttle)
    signin_policy: ThrottlePolicy = ThrottlePolicy(max_attempts=5, window_ms=300_000)
    signup_policy: ThrottlePolicy = ThrottlePolicy(max_attempts=3, window_ms=600_000)

    async def sign_in(self, email: Optional[str], password: Optional[str]) -> str:
        """Sign in and return the sanitized email that was used."""
        self.throttle.ensure(SIGNIN_KEY, self.signin_policy.max_attempts, self.signin_policy.window_ms)
        email_result = validate_email(email)
        password_result = validate_password(password)
        errors = collect_errors(email=email_result, password=password_result)
        if errors:
            raise ValidationError(errors)
        await self.provider.sign_in(email_result.sanitized_value, password or "")
        security_log("Sign-in succeeded", email=email_result.sanitized_value)
        return email_result.sanitized_value

    async def sign_up(
        self,
        email: Optional[str],
        password: Optional[str],
        full_name: Optional[str],
        role: object = Role.STUDENT,
    ) -> str:
        """Register a new account; the backend sends the verification email."""
        self.throttle.ensure(SIGNUP_KEY, self.signup_policy.max_attempts, self.signup_policy.window_ms)
        email_result = validate_email(email)
        password_result = validate_password(password)
        name_result = validate_text(full_name, FULL_NAME_MAX_LENGTH)
        errors = collect_errors(email=email_result, password=password_result, full_name=name_result)
        try:
            parsed_role = parse_role(role)
        except ValueError:
            errors["role"] = "Please choose teacher or student"
        if errors:
            raise ValidationError(errors)
        await self.provider.sign_up(
            email_result.sanitized_value,
            password or "",
            full_name=name_result.sanitized_value,
            role=parsed_role,
        )
        security_log("Sign-up requested", email=email_result.sanitized_value, role=parsed_role.value)
        return email_result.sanitized_value


def build_auth_flows(provider: AuthProviderProtocol, config, throttle: Optional[RequestThrottle] = None) -> AuthFlows:
    """Wire `AuthFlows` with the throttle policies from a `PortalConfig`."""
    return AuthFlows(
        provider=provider,
        throttle=throttle or get_default_throttle(),
        signin_policy=config.signin,
        signup_policy=config.signup,
    )


__all__ = ["AuthFlows", "AuthProviderProtocol", "build_auth_flows", "SIGNIN_KEY", "SIGNUP_KEY"]
