"""
Local Storage Implementations

LocalJsonStore keeps every key in one JSON file on the device,
the same shape a browser's localStorage would have: an object
mapping key -> JSON string. InMemoryStore is the test double.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from wealthtrack.services.storage.interface import KeyValueStore, StorageError

logger = structlog.get_logger(__name__)


class InMemoryStore(KeyValueStore):
    """Non-persistent store, used in tests and when no file is wanted."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class LocalJsonStore(KeyValueStore):
    """
    File-backed store.

    The whole file is loaded once and rewritten atomically on every
    change. A file that cannot be parsed is moved aside to
    `<name>.corrupt` and the store starts empty.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._items: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")
        except ValueError as e:
            backup = self._path.with_suffix(self._path.suffix + ".corrupt")
            logger.error(
                "storage_file_corrupt",
                path=str(self._path),
                backup=str(backup),
                error=str(e),
            )
            os.replace(self._path, backup)
            return {}

        if not isinstance(data, dict):
            logger.error("storage_file_unexpected_shape", path=str(self._path))
            return {}

        # Values are JSON strings; tolerate documents written as plain JSON
        return {
            key: value if isinstance(value, str) else json.dumps(value)
            for key, value in data.items()
        }

    def _flush(self) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=self._path.name, suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._items:
            del self._items[key]
            self._flush()
