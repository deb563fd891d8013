"""
Supabase-backed RecordStore adapter.

This adapter implements the `RecordStore` port on top of an async supabase
client. It is intentionally duck-typed to avoid a hard dependency during
testing: the client is expected to expose `.table(name)` returning a postgrest
query builder (`select`, `eq`, `in_`, `not_`, `is_`, `insert`, `execute`).

Security:
- The client must be created with the anon key; row level security on the
  backend decides what the signed-in user may read and write.
- Failures are reported as `BackendError` with a generic message; details are
  logged, never surfaced.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional
import asyncio
import logging

from .ports import BackendError, Record, split_filter


logger = logging.getLogger("eduportal.storage")


def build_select(include: Optional[Iterable[str]] = None) -> str:
    """Postgrest select clause embedding the related collections in `include`."""
    related = [name.strip() for name in (include or []) if name and name.strip()]
    return ", ".join(["*"] + [f"{name}(*)" for name in related])


class SupabaseRecordStore:
    """RecordStore using a supabase async client for table operations."""

    def __init__(self, client: Any, *, timeout_seconds: float = 30):
        self._client = client
        self._timeout = timeout_seconds

    def _table(self, collection: str) -> Any:
        table = getattr(self._client, "table", None)
        if table is None:
            raise BackendError("invalid_supabase_client")
        return table(collection)

    @staticmethod
    def _apply_filters(builder: Any, filters: Optional[Mapping[str, Any]]) -> Any:
        for field, value in (filters or {}).items():
            op, operand = split_filter(value)
            if op == "in":
                builder = builder.in_(field, list(operand))
            elif op == "not_in":
                # An empty exclusion list renders as `not.in.()` which the backend rejects.
                if not operand:
                    continue
                builder = builder.not_.in_(field, list(operand))
            elif op == "is":
                builder = builder.is_(field, "null" if operand is None else operand)
            else:
                builder = builder.eq(field, operand)
        return builder

    async def _execute(self, builder: Any, *, action: str, collection: str) -> List[Record]:
        try:
            response = await asyncio.wait_for(builder.execute(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("backend %s on %s timed out after %ss", action, collection, self._timeout)
            raise BackendError("backend_timeout") from exc
        except BackendError:
            raise
        except Exception as exc:
            logger.warning("backend %s on %s failed: %s", action, collection, exc.__class__.__name__)
            raise BackendError(f"backend_{action}_failed") from exc
        data = getattr(response, "data", None)
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return [dict(row) for row in data]

    async def query(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        include: Optional[Iterable[str]] = None,
    ) -> List[Record]:
        builder = self._table(collection).select(build_select(include))
        builder = self._apply_filters(builder, filters)
        rows = await self._execute(builder, action="query", collection=collection)
        logger.debug("queried %s rows from %s", len(rows), collection)
        return rows

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        builder = self._table(collection).insert(dict(record))
        rows = await self._execute(builder, action="insert", collection=collection)
        if not rows:
            raise BackendError("backend_insert_returned_nothing")
        return rows[0]


async def create_supabase_client(config: Any) -> Any:
    """Create the official async supabase client from a `PortalConfig`."""
    if not config.supabase_url or not config.supabase_anon_key:
        raise BackendError("supabase_not_configured")
    # Lazy import keeps the SDK out of pure view/validation code paths.
    from supabase import acreate_client  # type: ignore

    client = await acreate_client(config.supabase_url, config.supabase_anon_key)
    logger.info("supabase client initialised")
    return client


async def create_record_store(config: Any, client: Any = None) -> SupabaseRecordStore:
    """Build a store from a `PortalConfig`, reusing `client` when given."""
    if client is None:
        client = await create_supabase_client(config)
    return SupabaseRecordStore(client, timeout_seconds=config.timeout_seconds)


__all__ = ["SupabaseRecordStore", "build_select", "create_record_store", "create_supabase_client"]
