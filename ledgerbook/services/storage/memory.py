"""
In-Memory Storage Implementations

Used by tests and by the "memory" backend setting. The key-value store can
be given a byte quota so quota failures can be reproduced without a browser.
"""

from typing import Optional

from ledgerbook.models.audit import AuditEvent, AuditEventType
from ledgerbook.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
    QuotaExceededError,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Dict-backed key-value store.

    quota_bytes bounds the total UTF-8 size of all stored values.
    """

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ):
        self._data: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            others = sum(
                len(v.encode("utf-8"))
                for k, v in self._data.items()
                if k != key
            )
            needed = others + len(value.encode("utf-8"))
            if needed > self._quota_bytes:
                raise QuotaExceededError(
                    f"Writing {key} needs {needed} bytes, quota is {self._quota_bytes}"
                )
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_type(
        self,
        event_type: AuditEventType,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.event_type == event_type]
        events.sort(key=lambda e: e.timestamp)
        return events
