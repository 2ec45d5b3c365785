"""Persistence port interfaces for Mercury CI."""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class IKeyValueStore(ABC):
    """
    Abstract key-value persistence layer.

    Each collection is kept as one serialized blob under a fixed key.
    Implementations only need string get/set/delete.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Return the blob stored under ``key``.

        Args:
            key: Storage key.

        Returns:
            The stored string, or None when nothing is stored.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous blob."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; removing a missing key is not an error."""
        pass


class ICollection(ABC, Generic[T]):
    """
    Abstract bounded, ordered collection of stored records.

    Items are kept most-recent-first.
    """

    @abstractmethod
    def load(self) -> List[T]:
        """
        Load all items.

        Returns:
            Items, most recent first. Corrupt storage yields an empty list.
        """
        pass

    @abstractmethod
    def save(self, item: T) -> List[T]:
        """
        Prepend an item and apply the collection's eviction policy.

        Args:
            item: The record to store.

        Returns:
            The collection after insertion and eviction.
        """
        pass

    @abstractmethod
    def delete(self, item_id: str) -> bool:
        """
        Delete an item by id.

        Returns:
            True if an item was removed.
        """
        pass
