"""
Configuration parsing and validation for the eduportal core.

Intent:
    Read every environment variable the core depends on in one place: the
    Supabase endpoint and anon key, the backend timeout, the throttle policies
    for the auth actions and the default free-text length limit.

Why:
    Centralising configuration keeps defaults explicit and lets tests build a
    config from a plain mapping without touching the process environment.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class ThrottlePolicy:
    max_attempts: int
    window_ms: int


@dataclass(frozen=True)
class PortalConfig:
    env: str
    supabase_url: str
    supabase_anon_key: str
    timeout_seconds: int
    signin: ThrottlePolicy
    signup: ThrottlePolicy
    text_max_length: int
    email_redirect_url: Optional[str]

    @property
    def is_prod_like(self) -> bool:
        return _is_prod_like(self.env)


def _is_prod_like(env: str) -> bool:
    return (env or "").lower() in {"prod", "production", "stage", "staging"}


def _int_env(environ: Mapping[str, str], name: str, default: int, *, lo: int = 1, hi: Optional[int] = None) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")
    if value < lo or (hi is not None and value > hi):
        bound = f"{lo}..{hi}" if hi is not None else f">= {lo}"
        raise ValueError(f"{name} out of range ({bound}), got: {value}")
    return value


def load_dotenv_if_present(path: Optional[Path] = None) -> bool:
    """Load a `.env` file from the working directory (or `path`) when it exists."""
    dotenv_path = path or Path.cwd() / ".env"
    if not dotenv_path.exists():
        return False
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def load_config(environ: Optional[Mapping[str, str]] = None) -> PortalConfig:
    """
    Parse and validate the portal configuration.

    Behavior:
        - Without an explicit mapping, `.env` is loaded (existing variables win)
          and `os.environ` is read.
        - Throttle defaults mirror the auth page: sign-in 5 attempts per
          5 minutes, sign-up 3 attempts per 10 minutes.
        - Prod-like environments (`EDUPORTAL_ENV=prod|stage`) require the
          Supabase URL and anon key and refuse plain http.
    """
    if environ is None:
        load_dotenv_if_present()
        environ = os.environ

    env = (environ.get("EDUPORTAL_ENV") or "dev").strip().lower()
    url = (environ.get("SUPABASE_URL") or "").strip()
    anon_key = (environ.get("SUPABASE_ANON_KEY") or "").strip()

    if _is_prod_like(env):
        missing = [name for name, value in (("SUPABASE_URL", url), ("SUPABASE_ANON_KEY", anon_key)) if not value]
        if missing:
            raise ValueError(f"Missing required configuration in production: {', '.join(missing)}")
        if url.lower().startswith("http://"):
            raise ValueError("SUPABASE_URL must use https in production (got http)")

    return PortalConfig(
        env=env,
        supabase_url=url,
        supabase_anon_key=anon_key,
        timeout_seconds=_int_env(environ, "SUPABASE_TIMEOUT_SECONDS", 30, hi=300),
        signin=ThrottlePolicy(
            max_attempts=_int_env(environ, "SIGNIN_MAX_ATTEMPTS", 5),
            window_ms=_int_env(environ, "SIGNIN_WINDOW_MS", 300_000),
        ),
        signup=ThrottlePolicy(
            max_attempts=_int_env(environ, "SIGNUP_MAX_ATTEMPTS", 3),
            window_ms=_int_env(environ, "SIGNUP_WINDOW_MS", 600_000),
        ),
        text_max_length=_int_env(environ, "TEXT_MAX_LENGTH", 500),
        email_redirect_url=(environ.get("EMAIL_REDIRECT_URL") or "").strip() or None,
    )


__all__ = ["PortalConfig", "ThrottlePolicy", "load_config", "load_dotenv_if_present"]
