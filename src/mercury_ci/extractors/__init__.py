"""Entity extraction and classification components for Mercury CI."""

from .entity_patterns import EXTRACTORS, EntityExtractor
from .document_classifier import Classification, DocumentClassifier
from .text_stats import compute_text_stats, top_topics

__all__ = [
    "EXTRACTORS",
    "EntityExtractor",
    "Classification",
    "DocumentClassifier",
    "compute_text_stats",
    "top_topics",
]
