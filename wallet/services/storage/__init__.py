"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the ledger.
The medium is a local key-value store; the ledger is one JSON collection in it.
"""

from wallet.services.storage.interface import (
    KeyValueStore,
    LedgerStorageInterface,
    StorageError,
    StorageUnavailable,
)
from wallet.services.storage.key_value import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    key_to_filename,
)
from wallet.services.storage.json_ledger import (
    DEFAULT_STORAGE_KEY,
    JsonLedgerStorage,
    decode_records,
    encode_records,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    "LedgerStorageInterface",
    # Exceptions
    "StorageError",
    "StorageUnavailable",
    # Media
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "key_to_filename",
    # JSON ledger implementation
    "DEFAULT_STORAGE_KEY",
    "JsonLedgerStorage",
    "decode_records",
    "encode_records",
]
