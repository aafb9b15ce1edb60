"""
Local key-value storage.

Persists small JSON-serializable values (the signed-in user record, the
auth token) under string keys so a session survives a process restart.

- IKeyValueStore: the contract holders depend on
- InMemoryStore: process-local store (tests, ephemeral sessions)
- JsonFileStore: single JSON document on disk
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from .config import get_settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class IKeyValueStore(Protocol):
    """
    Interface for local key-value persistence.

    Values must be JSON-serializable. A missing key reads as None.
    """

    async def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    async def remove(self, key: str) -> None:
        """Delete key. Removing a missing key is not an error."""
        ...


class InMemoryStore:
    """Key-value store backed by a dict. Contents die with the process."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Copy of the current contents."""
        return dict(self._data)


class JsonFileStore:
    """
    Key-value store persisted as one JSON object on disk.

    Every write rewrites the whole document through a temp file and
    os.replace, so a crash never leaves a half-written file behind.
    File IO runs in a worker thread to keep the event loop free.
    """

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read storage file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to write storage file {self._path}: {e}") from e

    async def get(self, key: str) -> Optional[Any]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            try:
                await asyncio.to_thread(self._write_all, data)
            except StorageError as e:
                raise StorageError(e.message, key=key) from e
        logger.debug(f"Stored key '{key}' in {self._path}")

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            if key not in data:
                return
            del data[key]
            await asyncio.to_thread(self._write_all, data)
        logger.debug(f"Removed key '{key}' from {self._path}")


# Module-level store cache
_store: Optional[JsonFileStore] = None


def get_storage() -> JsonFileStore:
    """
    Get the file-backed store at the configured STORAGE_PATH.

    Returns:
        JsonFileStore shared by the whole process
    """
    global _store

    if _store is None:
        _store = JsonFileStore(Path(get_settings().storage_path).expanduser())

    return _store


def reset_storage() -> None:
    """
    Reset the cached store.

    Useful for testing or when configuration changes.
    """
    global _store
    _store = None
