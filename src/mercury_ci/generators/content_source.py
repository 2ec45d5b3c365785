"""Sources of template choices for generated content."""

import random
from typing import Optional, Sequence, TypeVar

from ..interfaces.generator import IContentSource

T = TypeVar("T")


class RandomContentSource(IContentSource):
    """
    Picks template options with ``random.Random``.

    A fixed ``seed`` makes generated briefings reproducible; ``None`` uses
    system randomness.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def choose(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[self.index(len(options))]

    def index(self, size: int) -> int:
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        return self._random.randrange(size)
