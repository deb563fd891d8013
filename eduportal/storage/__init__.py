"""Backend boundary: store ports, typed records and the Supabase adapter."""

from .ports import BackendError, RecordStore, SessionProvider

__all__ = ["BackendError", "RecordStore", "SessionProvider"]
