"""Persisted, bounded collections of stored records.

Each collection keeps its items as one JSON array under a fixed key of a
key-value store, most recent first.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Callable, Generic, List, Optional, TypeVar

from ..interfaces.storage import ICollection, IKeyValueStore
from ..models.records import StoredBriefing, StoredReport, UploadedFile
from ..models.timestamps import parse_iso, utc_now


logger = logging.getLogger(__name__)

T = TypeVar("T")

BRIEFINGS_KEY = "briefings"
BRIEFINGS_ARCHIVE_KEY = "briefings-archive"
REPORTS_KEY = "reports"
FILES_KEY = "data-files"

MAX_BRIEFINGS = 20
MAX_REPORTS = 10
MAX_FILES = 10
ARCHIVE_RETENTION_DAYS = 30


class JSONCollection(ICollection[T], Generic[T]):
    """
    Collection stored as a JSON array under one key.

    Args:
        store: Backing key-value store.
        key: Storage key for the blob.
        from_dict: Record deserializer.
        max_items: Active size limit; None means unbounded.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        key: str,
        from_dict: Callable[[dict], T],
        max_items: Optional[int] = None,
    ):
        self._store = store
        self._key = key
        self._from_dict = from_dict
        self._max_items = max_items

    @property
    def key(self) -> str:
        return self._key

    @property
    def max_items(self) -> Optional[int]:
        return self._max_items

    def load(self) -> List[T]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable '{self._key}' collection: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Discarding '{self._key}' collection: expected a JSON array")
            return []

        items = []
        for entry in data:
            try:
                items.append(self._from_dict(entry))
            except (TypeError, ValueError, KeyError, AttributeError) as e:
                logger.warning(f"Skipping malformed item in '{self._key}': {e}")
        return items

    def save(self, item: T) -> List[T]:
        items = [existing for existing in self.load() if existing.id != item.id]
        items.insert(0, item)

        overflow: List[T] = []
        if self._max_items is not None and len(items) > self._max_items:
            overflow = items[self._max_items:]
            items = items[:self._max_items]

        self._write(items)
        if overflow:
            self._handle_overflow(overflow)
        return items

    def delete(self, item_id: str) -> bool:
        items = self.load()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._write(remaining)
        return True

    def get(self, item_id: str) -> Optional[T]:
        for item in self.load():
            if item.id == item_id:
                return item
        return None

    def replace(self, item: T) -> bool:
        """
        Update an existing item in place, keeping its position.

        Returns:
            False when no item with the same id is stored.
        """
        items = self.load()
        for index, existing in enumerate(items):
            if existing.id == item.id:
                items[index] = item
                self._write(items)
                return True
        return False

    def clear(self) -> None:
        self._store.delete(self._key)

    def _write(self, items: List[T]) -> None:
        self._store.set(self._key, json.dumps([item.to_dict() for item in items]))

    def _handle_overflow(self, overflow: List[T]) -> None:
        logger.info(f"Dropped {len(overflow)} item(s) over the '{self._key}' limit")


class BriefingArchive(JSONCollection[StoredBriefing]):
    """
    Archive of briefings evicted from the active collection.

    Loading drops items archived more than 30 days ago and writes the
    pruned list back.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        retention_days: int = ARCHIVE_RETENTION_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(store, BRIEFINGS_ARCHIVE_KEY, StoredBriefing.from_dict)
        self._retention = timedelta(days=retention_days)
        self._clock = clock

    def load(self) -> List[StoredBriefing]:
        items = super().load()
        cutoff = self._clock() - self._retention

        kept = []
        for item in items:
            stamp = parse_iso(item.archived_at) or parse_iso(item.generated_at)
            if stamp is not None and stamp < cutoff:
                continue
            kept.append(item)

        if len(kept) != len(items):
            logger.info(f"Pruned {len(items) - len(kept)} briefing(s) from the archive")
            self._write(kept)
        return kept

    def add_archived(self, briefings: List[StoredBriefing]) -> List[StoredBriefing]:
        """Stamp briefings with ``archived_at`` and prepend them to the archive."""
        stamp = self._clock().isoformat()
        for briefing in briefings:
            briefing.archived_at = stamp
        ids = {b.id for b in briefings}
        items = briefings + [item for item in self.load() if item.id not in ids]
        self._write(items)
        return items


class BriefingCollection(JSONCollection[StoredBriefing]):
    """Active briefings, capped at 20; overflow moves to the archive."""

    def __init__(
        self,
        store: IKeyValueStore,
        archive: Optional[BriefingArchive] = None,
        max_items: int = MAX_BRIEFINGS,
    ):
        super().__init__(store, BRIEFINGS_KEY, StoredBriefing.from_dict, max_items)
        self._archive = archive or BriefingArchive(store)

    @property
    def archive(self) -> BriefingArchive:
        return self._archive

    def _handle_overflow(self, overflow: List[StoredBriefing]) -> None:
        logger.info(f"Archiving {len(overflow)} briefing(s)")
        self._archive.add_archived(overflow)


class ReportCollection(JSONCollection[StoredReport]):
    """Generated reports, capped at 10; overflow is dropped."""

    def __init__(self, store: IKeyValueStore, max_items: int = MAX_REPORTS):
        super().__init__(store, REPORTS_KEY, StoredReport.from_dict, max_items)


class FileCollection(JSONCollection[UploadedFile]):
    """Uploaded files, capped at 10; overflow is dropped."""

    def __init__(self, store: IKeyValueStore, max_items: int = MAX_FILES):
        super().__init__(store, FILES_KEY, UploadedFile.from_dict, max_items)
