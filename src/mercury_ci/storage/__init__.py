"""Persistence layer for Mercury CI."""

from .collections import (
    BRIEFINGS_ARCHIVE_KEY,
    BRIEFINGS_KEY,
    FILES_KEY,
    REPORTS_KEY,
    BriefingArchive,
    BriefingCollection,
    FileCollection,
    JSONCollection,
    ReportCollection,
)
from .database import DatabaseManager, get_database_url
from .kv_store import InMemoryKeyValueStore, SQLKeyValueStore
from .models import Base, KeyValueModel

__all__ = [
    "BRIEFINGS_ARCHIVE_KEY",
    "BRIEFINGS_KEY",
    "FILES_KEY",
    "REPORTS_KEY",
    "BriefingArchive",
    "BriefingCollection",
    "FileCollection",
    "JSONCollection",
    "ReportCollection",
    "DatabaseManager",
    "get_database_url",
    "InMemoryKeyValueStore",
    "SQLKeyValueStore",
    "Base",
    "KeyValueModel",
]
