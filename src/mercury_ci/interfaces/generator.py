"""Generator-side interfaces for Mercury CI."""

from abc import ABC, abstractmethod
from typing import Sequence, TypeVar

T = TypeVar("T")


class IContentSource(ABC):
    """
    Source of template choices for generated briefings.

    Production code uses system randomness; tests inject a seeded or
    stubbed source so generated text is reproducible.
    """

    @abstractmethod
    def choose(self, options: Sequence[T]) -> T:
        """Pick one element of ``options``."""
        pass

    @abstractmethod
    def index(self, size: int) -> int:
        """Pick an index in ``range(size)``."""
        pass


class IExportSink(ABC):
    """
    Destination for user-facing downloadable artifacts.

    Implementations accept formatted content and produce something the
    caller can hand to a user (a file path, an in-memory record, ...).
    """

    @abstractmethod
    def deliver(self, content: str, mime_type: str, filename: str) -> str:
        """
        Deliver an artifact.

        Args:
            content: Formatted artifact body.
            mime_type: MIME type, e.g. ``"text/csv"``.
            filename: Suggested download name.

        Returns:
            A locator for the delivered artifact.
        """
        pass
