"""PDF inspection module using pypdf.

Validates uploaded PDFs before they are attached to a message. The model
reads the document itself; we only make sure it is a readable PDF.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"


class PDFInfo(BaseModel):
    """Summary of an inspected PDF file.

    Attributes:
        pages: Total number of pages in the document.
        title: Document title from the metadata, if any.
    """

    pages: int = Field(ge=1)
    title: str | None = None


class PDFParseError(Exception):
    """Raised when a PDF cannot be read."""

    pass


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _read_title(reader: PdfReader) -> str | None:
    try:
        if reader.metadata and reader.metadata.title:
            return str(reader.metadata.title)
    except Exception as e:
        logger.warning(f"Failed to read PDF metadata: {e}")
    return None


def inspect_pdf(file_content: bytes) -> PDFInfo:
    """Check that bytes hold a readable PDF and summarize it.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFInfo with page count and title.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    return PDFInfo(pages=pages, title=_read_title(reader))
