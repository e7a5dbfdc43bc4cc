"""
PDF processing service using PyMuPDF.

Handles conversion of PDF documents to plain text for LLM processing.
"""

import logging
from typing import BinaryIO

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""

    pass


class PDFService:
    """
    Service for PDF text extraction.

    Text is read linearly: no layout or table reconstruction is attempted.
    Extraction is all-or-nothing per document.
    """

    def _read_bytes(self, file_bytes: bytes | BinaryIO) -> bytes:
        """Normalize bytes or a file-like object to bytes and check the PDF header."""
        if hasattr(file_bytes, "read"):
            pdf_bytes = file_bytes.read()
        else:
            pdf_bytes = file_bytes

        if not pdf_bytes:
            raise ExtractionError("Empty PDF file provided")

        # Validate PDF magic bytes
        if not pdf_bytes[:4] == b"%PDF":
            raise ExtractionError("Invalid PDF file: does not start with PDF header")

        return pdf_bytes

    def _open(self, pdf_bytes: bytes) -> fitz.Document:
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            logger.error("Could not open PDF: %s", e)
            raise ExtractionError(f"Invalid or corrupted PDF file: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise ExtractionError("PDF is encrypted and requires a password")
        if doc.page_count == 0:
            doc.close()
            raise ExtractionError("PDF contains no pages")
        return doc

    def extract_text(self, file_bytes: bytes | BinaryIO) -> str:
        """
        Extract the full linear text of a PDF.

        Text items on a page are joined by spaces, pages are joined by
        newlines in page order, and the result is stripped.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            The document text.

        Raises:
            ExtractionError: If the PDF cannot be parsed or any page fails.
        """
        pdf_bytes = self._read_bytes(file_bytes)
        doc = self._open(pdf_bytes)

        try:
            pages: list[str] = []
            for page_number, page in enumerate(doc, start=1):
                try:
                    words = page.get_text("words", sort=False)
                except Exception as e:
                    logger.error("Failed to read text of page %d: %s", page_number, e)
                    raise ExtractionError(
                        f"Failed to extract PDF text from page {page_number}: {e}"
                    ) from e
                # words are (x0, y0, x1, y1, text, block_no, line_no, word_no)
                pages.append(" ".join(word[4] for word in words))

            logger.info(
                "Extracted text from %d page(s) (%d bytes)", len(pages), len(pdf_bytes)
            )
            return "\n".join(pages).strip()
        finally:
            doc.close()


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
