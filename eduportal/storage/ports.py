"""
Ports to the external managed backend.

Keep these small and framework-agnostic so tests can supply simple fakes.
Every backend call is asynchronous; nothing else in the core suspends.

Filter mapping accepted by `RecordStore.query`:
    {"field": value}              equality
    {"field": ("in", [..])}       membership
    {"field": ("not_in", [..])}   exclusion (never pass an empty list)
    {"field": ("is", None)}       null check
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from ..identity_access.domain import Session


Record = Dict[str, Any]

FILTER_OPS = frozenset({"eq", "in", "not_in", "is"})


class BackendError(Exception):
    """Opaque failure reported by the backend (transport, authorization, shape)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RecordStore(Protocol):
    async def query(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        include: Optional[Iterable[str]] = None,
    ) -> List[Record]: ...

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record: ...


class SessionProvider(Protocol):
    async def current_session(self) -> Optional[Session]: ...


def split_filter(value: Any) -> tuple[str, Any]:
    """Normalise one filter value into `(op, operand)`."""
    if isinstance(value, tuple) and len(value) == 2 and value[0] in FILTER_OPS:
        op, operand = value
        if op in {"in", "not_in"} and not isinstance(operand, (list, tuple, set, frozenset)):
            raise ValueError(f"invalid_filter_operand:{op}")
        return op, operand
    return "eq", value


__all__ = ["BackendError", "Record", "RecordStore", "SessionProvider", "split_filter", "FILTER_OPS"]
