"""File content parsers for Mercury CI."""

from .content_extractor import ContentExtractor
from .pdf_parser import PDFTextParser
from .word_parser import WordTextParser

__all__ = [
    "ContentExtractor",
    "PDFTextParser",
    "WordTextParser",
]
