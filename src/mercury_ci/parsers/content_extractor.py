"""Content extraction for uploaded files."""

import logging
from typing import Optional

from ..exceptions import ExtractionError
from ..interfaces.extractor import IContentExtractor
from .pdf_parser import PDFTextParser
from .word_parser import WordTextParser


logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ("csv", "txt", "md")
TEXT_ENCODINGS = ("utf-8-sig", "cp1252")


class ContentExtractor(IContentExtractor):
    """
    Turns uploaded bytes into plain text.

    Text formats are decoded directly; PDF and DOCX go through their
    parsers. Anything unreadable comes back as an error-marker string such
    as ``"[PDF file: scan.pdf] Error extracting content: ..."``.
    """

    def __init__(
        self,
        pdf_parser: Optional[PDFTextParser] = None,
        word_parser: Optional[WordTextParser] = None,
    ):
        self._pdf_parser = pdf_parser or PDFTextParser()
        self._word_parser = word_parser or WordTextParser()

    def extract(self, data: bytes, extension: str, file_name: str = "") -> str:
        extension = (extension or "").lower().lstrip(".")
        name = file_name or f"upload.{extension}"

        if extension in TEXT_EXTENSIONS:
            return self._decode(data)
        if extension == "pdf":
            return self._extract_with(self._pdf_parser.parse, data, name, "PDF")
        if extension == "docx":
            return self._extract_with(self._word_parser.parse, data, name, "DOCX")
        if extension == "doc":
            logger.info(f"Legacy Word format for {name}; content not extracted")
            return f"[DOC file: {name}] Legacy Word format, content not extracted"

        return f"[Binary file: {name}] Content not extracted"

    def get_supported_extensions(self) -> list[str]:
        return [*TEXT_EXTENSIONS, "pdf", "doc", "docx"]

    def _extract_with(self, parse, data: bytes, name: str, label: str) -> str:
        try:
            text = parse(data, name)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for {name}: {e.message}")
            return f"[{label} file: {name}] Error extracting content: {e.message}"

        if not text.strip():
            logger.warning(f"No text layer found in {name}")
            return f"[{label} file: {name}] No extractable text"
        return text

    def _decode(self, data: bytes) -> str:
        for encoding in TEXT_ENCODINGS:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                continue
        return data.decode("utf-8", errors="replace")
