"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Ships a JSON file backend and in-memory backends, designed to be swappable.
"""

from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    CorruptPayloadError,
    KeyValueStoreInterface,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)
from ledgerbook.services.storage.json_file import JsonFileKeyValueStore
from ledgerbook.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptPayloadError",
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
