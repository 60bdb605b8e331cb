"""Chat client state: current session, visible messages, pending files.

The page renders from this object and calls its operations; nothing here
touches NiceGUI, so the behaviour is testable without a browser.

A reply that is still streaming belongs to the session it was requested
from. Creating, loading, deleting or resetting a session cancels it; the
partial reply is dropped and nothing more is written for that exchange.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from uuid import uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pdfchat.models.schemas import Attachment, ChatMessage, Role
from pdfchat.store.session_store import SessionStore
from pdfchat.ui.client import stream_chat_response

logger = logging.getLogger(__name__)

StreamFn = Callable[
    [
        list[ChatMessage],
        Callable[[str], None],
        Callable[[], None],
        Callable[[str], None],
    ],
    Awaitable[None],
]


def format_session_date(created_at: datetime, tz_name: str | None = None) -> str:
    """Sidebar date for a session in the browser's timezone.

    Falls back to the server's local timezone when the browser did not report
    one or reported a name zoneinfo does not know.
    """
    if tz_name:
        try:
            return created_at.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d")
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug(f"Unknown browser timezone {tz_name!r}")
    return created_at.astimezone().strftime("%Y-%m-%d")


class ChatController:
    """Client-side operations over the session store."""

    def __init__(
        self,
        store: SessionStore,
        stream_fn: StreamFn = stream_chat_response,
        on_change: Callable[[], None] | None = None,
        on_reply: Callable[[ChatMessage], None] | None = None,
    ) -> None:
        self.store = store
        self.current_session_id: str | None = None
        self.messages: list[ChatMessage] = []
        self.pending_files: list[Attachment] = []
        self.last_error: str | None = None
        self._stream_fn = stream_fn
        self._on_change = on_change
        self._on_reply = on_reply
        self._stream_task: asyncio.Task[None] | None = None

    @property
    def is_streaming(self) -> bool:
        return self._stream_task is not None and not self._stream_task.done()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _cancel_stream(self) -> None:
        if self.is_streaming:
            logger.info("Cancelling in-flight reply")
            self._stream_task.cancel()

    def create_session(self) -> str:
        """Start an empty session and make it current."""
        self._cancel_stream()
        session = self.store.create()
        self.current_session_id = session.id
        self.messages = []
        self.pending_files = []
        self._changed()
        return session.id

    def load_session(self, session_id: str) -> None:
        """Show a stored session; unknown ids are ignored."""
        session = self.store.get(session_id)
        if session is None:
            return
        self._cancel_stream()
        self.current_session_id = session_id
        self.messages = list(session.messages)
        self._changed()

    def delete_session(self, session_id: str) -> None:
        if session_id == self.current_session_id:
            self._cancel_stream()
        self.store.delete(session_id)
        if session_id == self.current_session_id:
            self.current_session_id = None
            self.messages = []
        self._changed()

    def reset(self) -> None:
        """Delete the current session, or clear an unsaved conversation."""
        if self.current_session_id is not None:
            self.delete_session(self.current_session_id)
        else:
            self._cancel_stream()
            self.messages = []
        self.pending_files = []
        self._changed()

    def attach(self, attachment: Attachment) -> None:
        self.pending_files.append(attachment)
        self._changed()

    def clear_files(self) -> None:
        self.pending_files = []
        self._changed()

    def _save_current(self) -> None:
        if self.current_session_id is not None:
            self.store.update(self.current_session_id, self.messages)

    async def submit_turn(self, text: str) -> ChatMessage | None:
        """Send a user turn and stream the assistant reply into the view.

        Returns:
            The completed assistant message, or None if nothing was sent,
            the request failed before any text arrived, or the reply was
            cancelled by a session change.
        """
        text = text.strip()
        if (not text and not self.pending_files) or self.is_streaming:
            return None

        if self.current_session_id is None and text:
            self.current_session_id = self.store.create().id

        self.messages.append(
            ChatMessage(role=Role.USER, content=text, attachments=self.pending_files)
        )
        self.pending_files = []
        self.last_error = None
        self._save_current()
        self._changed()

        history = list(self.messages)
        reply_index = len(self.messages)
        received: list[str] = []
        reply_id = uuid4().hex

        def on_chunk(content: str) -> None:
            received.append(content)
            reply = ChatMessage(id=reply_id, role=Role.ASSISTANT, content="".join(received))
            if len(self.messages) <= reply_index:
                self.messages.append(reply)
                self._changed()
                return
            self.messages[reply_index] = reply
            # Later chunks only touch the reply bubble.
            if self._on_reply is not None:
                self._on_reply(reply)
            else:
                self._changed()

        def on_complete() -> None:
            logger.debug(f"Reply complete ({len(received)} chunks)")

        def on_error(error: str) -> None:
            logger.warning(f"Chat request failed: {error}")
            self.last_error = error

        task = asyncio.create_task(self._stream_fn(history, on_chunk, on_complete, on_error))
        self._stream_task = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._stream_task is task:
                self._stream_task = None

        if task.cancelled():
            return None
        if exc := task.exception():
            self.last_error = str(exc) or type(exc).__name__
            logger.error(f"Chat stream raised: {exc!r}")

        self._save_current()
        self._changed()

        if not received:
            return None
        return self.messages[reply_index]
