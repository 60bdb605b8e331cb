from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

PDF_CONTENT_TYPE = "application/pdf"


class Role(str, Enum):
    """Speaker of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class Attachment(BaseModel):
    """A file attached to a single message.

    Attributes:
        content_type: MIME type of the payload.
        url: Reference to the payload, a data URL for uploaded files.
        name: Optional display name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_type: str = Field(..., alias="contentType")
    url: str
    name: str | None = None

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @property
    def is_pdf(self) -> bool:
        return self.content_type.startswith(PDF_CONTENT_TYPE)


class ChatMessage(BaseModel):
    """A single message in the conversation.

    Attributes:
        id: Identifier used as a stable render key.
        role: The speaker (user or assistant).
        content: The message text.
        attachments: Files sent along with the message, in selection order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Role
    content: str = ""
    attachments: list[Attachment] = Field(
        default_factory=list,
        validation_alias=AliasChoices("attachments", "experimental_attachments"),
    )


class ChatSession(BaseModel):
    """A saved conversation thread.

    Attributes:
        id: Locally unique identifier.
        title: Sidebar title derived from the first message.
        messages: Ordered message history.
        created_at: Creation timestamp.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="createdAt"
    )


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: The full conversation, oldest first.
    """

    messages: list[ChatMessage] = Field(..., min_length=1)

    def has_pdf_attachment(self) -> bool:
        """Whether any attachment in the conversation is exactly a PDF."""
        return any(
            attachment.content_type == PDF_CONTENT_TYPE
            for message in self.messages
            for attachment in message.attachments
        )


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        error: Error message if the stream failed after it was opened.
    """

    content: str
    done: bool
    error: str | None = None


class ErrorResponse(BaseModel):
    """JSON body returned with HTTP 500."""

    error: str
    details: str | None = None
    timestamp: str | None = None
