"""Pydantic models for the chat wire format and persisted sessions.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Attachment: File reference carried by a message
    - ChatMessage: Individual message in conversation
    - ChatSession: Saved conversation with title and timestamp
    - ChatRequest: Incoming chat request payload
    - StreamChunk: One frame of the streamed reply
    - ErrorResponse: JSON body of a failed request
"""

from pdfchat.models.schemas import (
    PDF_CONTENT_TYPE,
    Attachment,
    ChatMessage,
    ChatRequest,
    ChatSession,
    ErrorResponse,
    Role,
    StreamChunk,
)

__all__ = [
    "PDF_CONTENT_TYPE",
    "Attachment",
    "ChatMessage",
    "ChatRequest",
    "ChatSession",
    "ErrorResponse",
    "Role",
    "StreamChunk",
]
