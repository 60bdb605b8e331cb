"""Conversion between uploaded files, data URLs and attachments."""

import base64
import binascii
import logging
import mimetypes

from pdfchat.models.schemas import PDF_CONTENT_TYPE, Attachment, ChatMessage
from pdfchat.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, inspect_pdf

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class AttachmentError(Exception):
    """Raised when an uploaded file cannot be attached."""

    pass


def to_data_url(data: bytes, content_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def decode_data_url(url: str) -> tuple[str, bytes]:
    """Split a data URL into its content type and payload.

    Args:
        url: A ``data:`` URL, base64 or percent-free plain text.

    Returns:
        Tuple of (content_type, payload bytes).

    Raises:
        ValueError: If the URL is not a well-formed data URL.
    """
    if not url.startswith("data:") or "," not in url:
        raise ValueError("Not a data URL")

    header, _, payload = url[5:].partition(",")
    params = header.split(";")
    content_type = params[0] or "text/plain"

    if "base64" in params[1:]:
        try:
            return content_type, base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload in data URL: {e}") from e
    return content_type, payload.encode()


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


def guess_content_type(filename: str, declared: str | None = None) -> str:
    if declared:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_CONTENT_TYPE


def attachment_from_upload(
    filename: str,
    data: bytes,
    content_type: str | None = None,
) -> Attachment:
    """Build an attachment from an uploaded file.

    PDFs are inspected with pypdf so that corrupt files are rejected before
    they reach the model.

    Args:
        filename: Original file name, used as the display name.
        data: File content.
        content_type: MIME type reported by the browser, if any.

    Returns:
        Attachment carrying the file as a data URL.

    Raises:
        AttachmentError: If the file is empty, too large, or an unreadable PDF.
    """
    if not data:
        raise AttachmentError(f"{filename} is empty")
    if len(data) > MAX_FILE_SIZE:
        raise AttachmentError(f"{filename} exceeds maximum allowed size (10MB)")

    resolved_type = guess_content_type(filename, content_type)

    if resolved_type == PDF_CONTENT_TYPE:
        try:
            info = inspect_pdf(data)
        except PDFParseError as e:
            raise AttachmentError(f"{filename}: {e}") from e
        logger.info(f"Attached PDF {filename} ({info.pages} pages)")

    return Attachment(
        content_type=resolved_type,
        url=to_data_url(data, resolved_type),
        name=filename or None,
    )


def displayable_attachments(message: ChatMessage) -> list[Attachment]:
    """Attachments the message view can render: images and PDFs only."""
    return [a for a in message.attachments if a.is_image or a.is_pdf]
