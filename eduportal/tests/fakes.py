"""
In-memory fakes for the backend ports.

`InMemoryStore` honours the same filter mapping as the Supabase adapter
(equality, "in", "not_in", "is") and records every call so tests can assert
what reached the backend.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional
import itertools

from eduportal.identity_access.domain import Role, Session
from eduportal.storage.ports import BackendError, split_filter


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    for field, value in filters.items():
        op, operand = split_filter(value)
        current = row.get(field)
        if op == "in":
            if current not in list(operand):
                return False
        elif op == "not_in":
            if not operand:
                raise BackendError("malformed_filter:not_in_empty")
            if current in list(operand):
                return False
        elif op == "is":
            if current is not operand:
                return False
        elif current != operand:
            return False
    return True


class InMemoryStore:
    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.data: Dict[str, List[Dict[str, Any]]] = {k: [dict(r) for r in v] for k, v in (data or {}).items()}
        self.queries: List[tuple[str, Dict[str, Any]]] = []
        self.inserts: List[tuple[str, Dict[str, Any]]] = []
        self.fail_with: Optional[str] = None
        self._ids = itertools.count(1)

    async def query(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        include: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        if self.fail_with:
            raise BackendError(self.fail_with)
        self.queries.append((collection, dict(filters or {})))
        return [dict(r) for r in self.data.get(collection, []) if _matches(r, filters or {})]

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        if self.fail_with:
            raise BackendError(self.fail_with)
        self.inserts.append((collection, dict(record)))
        row = {"id": f"{collection}-{next(self._ids)}", "created_at": "2024-01-15T09:00:00+00:00", **record}
        self.data.setdefault(collection, []).append(row)
        return dict(row)

    def queried(self, collection: str) -> List[Dict[str, Any]]:
        return [f for c, f in self.queries if c == collection]


class FakeSessions:
    def __init__(self, session: Optional[Session] = None):
        self.session = session

    async def current_session(self) -> Optional[Session]:
        return self.session


def teacher(user_id: str = "teacher-1") -> Session:
    return Session(user_id=user_id, role=Role.TEACHER)


def student(user_id: str = "student-1") -> Session:
    return Session(user_id=user_id, role=Role.STUDENT)


class FakeClock:
    """Millisecond clock advanced explicitly by tests."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeAuthProvider:
    def __init__(self, error: Optional[str] = None):
        self.error = error
        self.sign_ins: List[tuple[str, str]] = []
        self.sign_ups: List[Dict[str, Any]] = []

    async def sign_in(self, email: str, password: str) -> None:
        self.sign_ins.append((email, password))
        if self.error:
            raise BackendError(self.error)

    async def sign_up(self, email: str, password: str, *, full_name: str, role: Role) -> None:
        self.sign_ups.append({"email": email, "password": password, "full_name": full_name, "role": role})
        if self.error:
            raise BackendError(self.error)
