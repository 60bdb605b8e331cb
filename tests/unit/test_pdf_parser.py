"""Unit tests for PDF inspection."""

from collections.abc import Callable

import pytest
import pytest_check as check

from pdfchat.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, inspect_pdf


class TestInspectPdfValid:
    """Tests for readable PDFs."""

    def test_counts_pages(self, make_pdf: Callable[..., bytes]) -> None:
        result = inspect_pdf(make_pdf(pages=3))

        check.equal(result.pages, 3)
        check.is_none(result.title)

    def test_reads_title_from_metadata(self, make_pdf: Callable[..., bytes]) -> None:
        result = inspect_pdf(make_pdf(title="Quarterly report"))

        check.equal(result.pages, 1)
        check.equal(result.title, "Quarterly report")


class TestInspectPdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(PDFParseError, match="Empty file"):
            inspect_pdf(b"")

    def test_rejects_non_pdf_file(self) -> None:
        with pytest.raises(PDFParseError, match="Invalid PDF"):
            inspect_pdf(b"This is not a real PDF file")

    def test_rejects_oversized_file(self) -> None:
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(PDFParseError, match="exceeds maximum"):
            inspect_pdf(oversized)

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(PDFParseError, match="Corrupt|Failed|no pages"):
            inspect_pdf(b"%PDF-1.4\n1 0 obj\n<<")
