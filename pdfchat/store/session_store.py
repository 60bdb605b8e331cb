"""Chat session store with write-through persistence.

The store keeps the session list in memory and serializes the whole list to
a key-value storage after every mutation. In the web UI the storage is
NiceGUI's per-browser ``app.storage.user``; any mutable mapping works, which
is what the tests use.

Writes are whole-list overwrites with no versioning. Two tabs sharing the
same storage race, and the last writer wins.
"""

import json
import logging
import time
from collections.abc import Iterable, MutableMapping
from typing import Any

from pydantic import ValidationError

from pdfchat.models.schemas import ChatMessage, ChatSession

logger = logging.getLogger(__name__)

STORAGE_KEY = "chatSessions"
DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 30


def generate_title(first_message: str) -> str:
    """Derive a sidebar title from the first message of a session."""
    if not first_message:
        return DEFAULT_TITLE
    if len(first_message) > TITLE_MAX_LENGTH:
        return first_message[:TITLE_MAX_LENGTH] + "..."
    return first_message


def new_session_id(existing: Iterable[str] = ()) -> str:
    """Allocate an id from the current time in milliseconds.

    Bumped past any id already taken, so ids stay unique when two sessions
    are created within the same millisecond.
    """
    taken = set(existing)
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


class SessionStore:
    """Session list mirrored to a key-value storage.

    Sessions are ordered most recent first. Every mutating method persists
    the full list before returning.
    """

    def __init__(
        self,
        storage: MutableMapping[str, Any],
        key: str = STORAGE_KEY,
    ) -> None:
        self._storage = storage
        self._key = key
        self._sessions: list[ChatSession] = self._load()

    @property
    def sessions(self) -> list[ChatSession]:
        return list(self._sessions)

    def get(self, session_id: str) -> ChatSession | None:
        return next((s for s in self._sessions if s.id == session_id), None)

    def create(self) -> ChatSession:
        """Insert an empty session at the top of the list."""
        session = ChatSession(
            id=new_session_id(s.id for s in self._sessions),
            title=DEFAULT_TITLE,
        )
        self._sessions.insert(0, session)
        self.save()
        logger.debug(f"Created chat session {session.id}")
        return session

    def update(self, session_id: str, messages: list[ChatMessage]) -> ChatSession | None:
        """Replace a session's messages and derive its title once.

        Returns:
            The updated session, or None if the id is unknown.
        """
        session = self.get(session_id)
        if session is None:
            return None

        session.messages = list(messages)
        if session.title == DEFAULT_TITLE and messages:
            session.title = generate_title(messages[0].content)
        self.save()
        return session

    def delete(self, session_id: str) -> bool:
        remaining = [s for s in self._sessions if s.id != session_id]
        if len(remaining) == len(self._sessions):
            return False
        self._sessions = remaining
        self.save()
        logger.debug(f"Deleted chat session {session_id}")
        return True

    def save(self) -> None:
        """Serialize the full session list to storage."""
        self._storage[self._key] = json.dumps(
            [s.model_dump(mode="json", by_alias=True) for s in self._sessions]
        )

    def _load(self) -> list[ChatSession]:
        """Read sessions from storage, discarding anything malformed.

        Unparseable data removes the key entirely; records that parse but do
        not validate are dropped one by one.
        """
        raw = self._storage.get(self._key)
        if not raw:
            return []

        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupt chat sessions: {e}")
            self._storage.pop(self._key, None)
            return []

        if not isinstance(records, list):
            logger.warning("Discarding chat sessions: stored value is not a list")
            self._storage.pop(self._key, None)
            return []

        sessions: list[ChatSession] = []
        seen: set[str] = set()
        for record in records:
            try:
                session = ChatSession.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Discarding corrupt chat session: {e.error_count()} errors")
                continue
            if session.id in seen:
                logger.warning(f"Discarding duplicate chat session {session.id}")
                continue
            seen.add(session.id)
            sessions.append(session)
        return sessions
