"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on local disk is the default durable
store because:
1. It behaves like browser local storage: string values under fixed keys
2. Users can open and back up the file themselves
3. No database setup required

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal ledger)
- No cross-process locking (the engine has exactly one writer)

Writes go to a temporary file first and are moved into place with
os.replace, so a crash mid-write leaves the previous file intact.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledgerbook.services.storage.interface import (
    CorruptPayloadError,
    KeyValueStoreInterface,
    StorageError,
    StorageUnavailableError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object file.

    Values are stored verbatim as strings; callers do their own encoding.
    """

    def __init__(self, path: Union[str, Path], write_attempts: int = 3):
        self._path = Path(path)
        self._write_attempts = write_attempts

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Read the whole file. A missing file is an empty store."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptPayloadError(f"{self._path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise CorruptPayloadError(f"{self._path} does not hold a JSON object")

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        """Atomically replace the file, retrying transient OS errors."""
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._path.parent.mkdir(parents=True, exist_ok=True)
                    tmp_path = self._path.with_name(self._path.name + ".tmp")
                    tmp_path.write_text(
                        json.dumps(data, ensure_ascii=False, indent=2),
                        encoding="utf-8",
                    )
                    os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    def _read_for_update(self) -> dict[str, str]:
        """
        Read the file before a write.

        A corrupt file is moved aside so new writes can proceed; reads of
        the other keys already fell back to defaults.
        """
        try:
            return self._read_all()
        except CorruptPayloadError as e:
            backup = self._path.with_name(self._path.name + ".corrupt")
            logger.warning(
                "corrupt_store_moved_aside",
                path=str(self._path),
                backup=str(backup),
                error=str(e),
            )
            try:
                os.replace(self._path, backup)
            except OSError as move_error:
                raise StorageError(f"Cannot move corrupt file aside: {move_error}")
            return {}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_for_update()
        if key in data:
            del data[key]
            self._write_all(data)
