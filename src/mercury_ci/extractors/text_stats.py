"""Text statistics utilities."""

import re
from collections import Counter
from typing import List

from ..models.analysis import TextStats

WORDS_PER_PAGE = 500

_WORD_PATTERN = re.compile(r"[A-Za-z0-9£$€'’-]+")
_TOPIC_PATTERN = re.compile(r"[A-Za-z]{4,}")

STOP_WORDS = frozenset({
    "this", "that", "with", "from", "have", "will", "your", "their", "there",
    "which", "been", "were", "they", "them", "then", "than", "into", "also",
    "such", "shall", "would", "could", "should", "about", "other", "these",
    "those", "what", "when", "where", "while", "each", "more", "most", "some",
    "only", "over", "under", "very", "just", "upon", "being", "here", "page",
})


def count_words(text: str) -> int:
    return len(_WORD_PATTERN.findall(text or ""))


def compute_text_stats(text: str) -> TextStats:
    """
    Compute word, line, paragraph and page counts for text.

    Paragraphs are blocks separated by blank lines. Pages are a rough
    estimate at 500 words per page.
    """
    if not text or not text.strip():
        return TextStats()

    word_count = count_words(text)
    lines = [line for line in text.splitlines() if line.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]

    return TextStats(
        word_count=word_count,
        line_count=len(lines),
        paragraph_count=len(paragraphs),
        pages_hint=max(1, word_count // WORDS_PER_PAGE + 1),
    )


def top_topics(text: str, limit: int = 5) -> List[str]:
    """Most frequent non-stop-words of four letters or more."""
    words = [w.lower() for w in _TOPIC_PATTERN.findall(text or "")]
    counts = Counter(w for w in words if w not in STOP_WORDS)
    return [word for word, _ in counts.most_common(limit)]
