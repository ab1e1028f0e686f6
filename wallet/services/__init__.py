"""Services package."""

from wallet.services.auth import (
    AuthenticationError,
    AuthenticationFailed,
    AuthenticationGate,
    BiometricCapability,
    Navigator,
    NotEnrolled,
    ScreenNavigator,
    StaticBiometricCapability,
)
from wallet.services.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    JsonLedgerStorage,
    KeyValueStore,
    LedgerStorageInterface,
    StorageError,
    StorageUnavailable,
)

__all__ = [
    # Auth services
    "AuthenticationError",
    "AuthenticationFailed",
    "AuthenticationGate",
    "BiometricCapability",
    "Navigator",
    "NotEnrolled",
    "ScreenNavigator",
    "StaticBiometricCapability",
    # Storage services
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonLedgerStorage",
    "KeyValueStore",
    "LedgerStorageInterface",
    "StorageError",
    "StorageUnavailable",
]
