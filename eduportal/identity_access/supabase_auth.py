"""
Supabase auth adapter: sign-in, sign-up and the current session.

The adapter wraps the async supabase client's `auth` namespace. The role is
read from the user metadata written at sign-up; when it is missing the
`profiles` row is consulted. Any client failure is reported as `BackendError`
with the client's message, which the UI shows as a generic failure notice.
"""
from __future__ import annotations

from typing import Any, Dict, Optional
import logging

from ..storage.ports import BackendError
from .domain import Role, Session, parse_role


logger = logging.getLogger("eduportal.identity_access")


def _attr(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


class SupabaseAuthProvider:
    def __init__(self, client: Any, *, email_redirect_url: Optional[str] = None):
        self._client = client
        self._redirect = email_redirect_url

    async def sign_in(self, email: str, password: str) -> None:
        try:
            await self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            raise BackendError(str(exc) or "sign_in_failed") from exc

    async def sign_up(self, email: str, password: str, *, full_name: str, role: Role) -> None:
        options: Dict[str, Any] = {"data": {"full_name": full_name, "role": role.value}}
        if self._redirect:
            options["email_redirect_to"] = self._redirect
        try:
            await self._client.auth.sign_up({"email": email, "password": password, "options": options})
        except Exception as exc:
            raise BackendError(str(exc) or "sign_up_failed") from exc

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except Exception as exc:
            raise BackendError(str(exc) or "sign_out_failed") from exc

    async def _role_from_profile(self, user_id: str) -> Optional[str]:
        try:
            response = await self._client.table("profiles").select("role").eq("id", user_id).execute()
        except Exception as exc:
            raise BackendError("backend_query_failed") from exc
        rows = getattr(response, "data", None) or []
        return rows[0].get("role") if rows else None

    async def current_session(self) -> Optional[Session]:
        """Return the signed-in user's id and role, or None when signed out."""
        try:
            raw = await self._client.auth.get_session()
        except Exception as exc:
            raise BackendError(str(exc) or "session_lookup_failed") from exc
        user = _attr(raw, "user")
        user_id = _attr(user, "id")
        if not user_id:
            return None
        metadata = _attr(user, "user_metadata") or {}
        role_value = metadata.get("role") if isinstance(metadata, dict) else None
        if not role_value:
            role_value = await self._role_from_profile(str(user_id))
        try:
            role = parse_role(role_value)
        except ValueError:
            logger.warning("session without a valid role; treating as signed out")
            return None
        return Session(user_id=str(user_id), role=role)


__all__ = ["SupabaseAuthProvider"]
