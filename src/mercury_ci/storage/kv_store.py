"""Key-value store implementations."""

import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import StorageError
from ..interfaces.storage import IKeyValueStore
from ..models.timestamps import utc_now
from .database import DatabaseManager
from .models import KeyValueModel


logger = logging.getLogger(__name__)


class InMemoryKeyValueStore(IKeyValueStore):
    """Dictionary-backed store for tests and single-process use."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class SQLKeyValueStore(IKeyValueStore):
    """
    Store backed by the ``kv_store`` table.

    Read and write failures are raised as StorageError; the table is
    created on first use.
    """

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager
        self._db.init_database()

    def get(self, key: str) -> Optional[str]:
        try:
            with self._db.get_session() as session:
                row = session.get(KeyValueModel, key)
                return row.value if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read key '{key}': {e}")
            raise StorageError(
                message=f"Failed to read key '{key}'",
                details={"original_error": str(e)},
            )

    def set(self, key: str, value: str) -> None:
        try:
            with self._db.get_session() as session:
                row = session.get(KeyValueModel, key)
                if row is None:
                    session.add(KeyValueModel(key=key, value=value, updated_at=utc_now()))
                else:
                    row.value = value
                    row.updated_at = utc_now()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write key '{key}': {e}")
            raise StorageError(
                message=f"Failed to write key '{key}'",
                details={"original_error": str(e)},
            )

    def delete(self, key: str) -> None:
        try:
            with self._db.get_session() as session:
                row = session.get(KeyValueModel, key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete key '{key}': {e}")
            raise StorageError(
                message=f"Failed to delete key '{key}'",
                details={"original_error": str(e)},
            )
