"""PDF text extraction."""

import io
import logging

import pdfplumber
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..exceptions import ExtractionError


logger = logging.getLogger(__name__)


class PDFTextParser:
    """
    Extracts plain text from PDF bytes.

    Uses PyPDF2 to validate the file and count pages, and pdfplumber for
    the actual text extraction.
    """

    def parse(self, data: bytes, file_name: str = "") -> str:
        """
        Extract text from a PDF.

        Args:
            data: Raw PDF bytes.
            file_name: Original file name, used in error context.

        Returns:
            Page texts joined by blank lines. May be empty for scanned PDFs.

        Raises:
            ExtractionError: If the PDF is corrupted, encrypted or unreadable.
        """
        try:
            reader = PdfReader(io.BytesIO(data))
            page_count = len(reader.pages)
        except PdfReadError as e:
            raise ExtractionError(
                message="PDF file is corrupted or encrypted",
                file_name=file_name,
                details={"original_error": str(e)},
            )
        except Exception as e:
            raise ExtractionError(
                message=f"Failed to open PDF: {str(e)}",
                file_name=file_name,
                details={"original_error": str(e)},
            )

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                text = self._extract_raw_text(pdf)
        except Exception as e:
            raise ExtractionError(
                message=f"Failed to read PDF content: {str(e)}",
                file_name=file_name,
                details={"original_error": str(e)},
            )

        logger.debug(f"Extracted {len(text)} characters from {page_count} page(s) of {file_name}")
        return text

    def _extract_raw_text(self, pdf: pdfplumber.PDF) -> str:
        text_parts = []
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return "\n\n".join(text_parts)
