"""
Services package.

The persistence adapter depends on the audit logger and is imported from
ledgerbook.services.persistence directly.
"""

from ledgerbook.services.ids import generate_id
from ledgerbook.services.storage import (
    AuditStorageInterface,
    CorruptPayloadError,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    QuotaExceededError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    "generate_id",
    # Storage services
    "AuditStorageInterface",
    "CorruptPayloadError",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "QuotaExceededError",
    "StorageError",
    "StorageUnavailableError",
]
