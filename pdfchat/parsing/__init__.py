"""File handling for chat attachments.

Responsibilities:
    - PDF validation with pypdf before a file is attached
    - Data URL encoding and decoding
    - Content type resolution for uploads
    - Filtering attachments down to what the message view can render
"""

from pdfchat.parsing.attachments import (
    AttachmentError,
    attachment_from_upload,
    decode_data_url,
    displayable_attachments,
    to_data_url,
)
from pdfchat.parsing.pdf_parser import PDFInfo, PDFParseError, inspect_pdf

__all__ = [
    "AttachmentError",
    "PDFInfo",
    "PDFParseError",
    "attachment_from_upload",
    "decode_data_url",
    "displayable_attachments",
    "inspect_pdf",
    "to_data_url",
]
