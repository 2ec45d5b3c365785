"""Content extraction interface for Mercury CI."""

from abc import ABC, abstractmethod


class IContentExtractor(ABC):
    """
    Abstract interface for turning uploaded bytes into plain text.

    Implementations never raise for unreadable content: they return an
    error-marker string instead (for example ``"[PDF file: report.pdf ...]"``
    or a string containing ``"Error extracting content"``), which the
    analysis assembler detects and degrades on.
    """

    @abstractmethod
    def extract(self, data: bytes, extension: str, file_name: str = "") -> str:
        """
        Extract plain text from raw file bytes.

        Args:
            data: Raw file content.
            extension: Lower-case extension without the dot (``"pdf"``).
            file_name: Original file name, used in error markers.

        Returns:
            Extracted text or an error-marker string.
        """
        pass

    @abstractmethod
    def get_supported_extensions(self) -> list[str]:
        """Return extensions this extractor can handle."""
        pass
