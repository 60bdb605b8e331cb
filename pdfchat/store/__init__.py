"""Persisted chat sessions."""

from pdfchat.store.session_store import (
    DEFAULT_TITLE,
    STORAGE_KEY,
    SessionStore,
    generate_title,
    new_session_id,
)

__all__ = [
    "DEFAULT_TITLE",
    "STORAGE_KEY",
    "SessionStore",
    "generate_title",
    "new_session_id",
]
