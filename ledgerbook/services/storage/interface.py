"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for another durable key-value store later
2. Use in-memory storage for testing
3. Keep the ledger logic decoupled from where bytes end up

The interface is intentionally simple - whole string values under a
handful of fixed keys. Serialization is the PersistenceAdapter's job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledgerbook.models.audit import AuditEvent, AuditEventType


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a durable key-value store.

    Any backend (JSON file, browser-style local storage, a database table)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key was never written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        Raises:
            QuotaExceededError: If the value does not fit
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_type(
        self,
        event_type: AuditEventType,
    ) -> list[AuditEvent]:
        """Get all events of one type in chronological order."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be reached or opened."""
    pass


class QuotaExceededError(StorageError):
    """The value is larger than the backend is willing to hold."""
    pass


class CorruptPayloadError(StorageError):
    """A stored value exists but cannot be decoded."""
    pass
