"""Abstract interfaces for Mercury CI."""

from .extractor import IContentExtractor
from .generator import IContentSource, IExportSink
from .storage import ICollection, IKeyValueStore

__all__ = [
    "IContentExtractor",
    "IContentSource",
    "IExportSink",
    "ICollection",
    "IKeyValueStore",
]
