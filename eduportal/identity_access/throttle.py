"""
Sliding-window request throttle for sensitive mutating actions.

Why:
    Sign-in and sign-up should not be repeatable in rapid succession from the
    same client. This is advisory friction in front of the backend, not a
    security boundary: the backend enforces its own limits.

Algorithm:
    Per key, a ledger keeps the timestamps (ms) of accepted attempts. Each
    check purges timestamps with `now - ts >= window_ms`, rejects when the
    remaining count reached `max_attempts` (a rejected attempt is not
    recorded) and otherwise records `now`.

The clock and the ledger storage are injected so tests can drive time
explicitly. One instance is meant to live for the whole process/session.
"""
from __future__ import annotations

from typing import Callable, Dict, List, MutableMapping, Optional
import logging
import time

from ..security import security_log


def _now_ms() -> int:
    return int(time.time() * 1000)


class ThrottleExceeded(Exception):
    """Raised by `RequestThrottle.ensure` when the key is over its budget."""

    def __init__(self, key: str):
        self.key = key
        super().__init__("Too many attempts. Please wait before trying again.")


class RequestThrottle:
    def __init__(
        self,
        *,
        clock: Callable[[], int] = _now_ms,
        ledger: Optional[MutableMapping[str, List[int]]] = None,
    ):
        self._clock = clock
        self._ledger: MutableMapping[str, List[int]] = ledger if ledger is not None else {}

    def _recent(self, key: str, window_ms: int, now: int) -> List[int]:
        return [ts for ts in self._ledger.get(key, []) if now - ts < window_ms]

    def check(self, key: str, max_attempts: int = 5, window_ms: int = 60_000) -> bool:
        """Return True and record the attempt when `key` is within budget."""
        now = self._clock()
        attempts = self._recent(key, window_ms, now)
        if len(attempts) >= max_attempts:
            self._ledger[key] = attempts
            security_log(
                "Rate limit exceeded",
                level=logging.WARNING,
                key=key,
                attempts=len(attempts),
                max_attempts=max_attempts,
                window_ms=window_ms,
            )
            return False
        attempts.append(now)
        self._ledger[key] = attempts
        return True

    def ensure(self, key: str, max_attempts: int = 5, window_ms: int = 60_000) -> None:
        """Like `check` but raises `ThrottleExceeded` instead of returning False."""
        if not self.check(key, max_attempts, window_ms):
            raise ThrottleExceeded(key)

    def remaining(self, key: str, max_attempts: int = 5, window_ms: int = 60_000) -> int:
        """Attempts still available for `key` in the current window (records nothing)."""
        return max(0, max_attempts - len(self._recent(key, window_ms, self._clock())))

    def reset(self, key: str) -> None:
        self._ledger.pop(key, None)

    def snapshot(self) -> Dict[str, List[int]]:
        return {k: list(v) for k, v in self._ledger.items()}


_default_throttle: Optional[RequestThrottle] = None


def get_default_throttle() -> RequestThrottle:
    """Process-wide throttle used by `check_rate_limit`."""
    global _default_throttle
    if _default_throttle is None:
        _default_throttle = RequestThrottle()
    return _default_throttle


def check_rate_limit(key: str, max_attempts: int = 5, window_ms: int = 60_000) -> bool:
    return get_default_throttle().check(key, max_attempts, window_ms)


__all__ = [
    "RequestThrottle",
    "ThrottleExceeded",
    "check_rate_limit",
    "get_default_throttle",
]
