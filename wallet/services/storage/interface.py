"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for two layers:
1. KeyValueStore - the raw on-device medium (string values under string keys)
2. LedgerStorageInterface - the expense collection on top of it

This allows us to:
1. Keep the ledger logic unaware of files and directories
2. Use in-memory storage for testing and throwaway sessions
3. Swap the medium without touching the view-model

The interface is intentionally tiny. There is no partial update:
every mutation reads the whole collection and writes it back whole.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from wallet.models.expense import ExpenseRecord


class KeyValueStore(ABC):
    """
    Abstract on-device key-value medium.

    Values are opaque strings; the ledger layer owns their format.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key was never written

        Raises:
            OSError: If the medium cannot be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key in one step.

        Raises:
            OSError: If the medium cannot be written
        """
        pass


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the expense collection.

    Any implementation must persist the full ordered collection as a
    single unit.
    """

    @property
    @abstractmethod
    def storage_key(self) -> str:
        """Namespaced key the collection lives under."""
        pass

    @abstractmethod
    async def load(self) -> list[ExpenseRecord]:
        """
        Load the full collection, newest first.

        Returns:
            The stored records, or an empty list if nothing was saved yet

        Raises:
            StorageUnavailable: If the medium cannot be read or decoded
        """
        pass

    @abstractmethod
    async def save(self, records: Sequence[ExpenseRecord]) -> bool:
        """
        Replace the stored collection with `records`.

        Returns:
            True if saved successfully

        Raises:
            StorageUnavailable: If the write cannot complete
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailable(StorageError):
    """The persistence medium could not be read or written."""

    def __init__(self, message: str, operation: str = "unknown"):
        super().__init__(message)
        self.operation = operation
