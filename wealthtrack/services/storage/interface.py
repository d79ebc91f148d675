"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain key-value store holding one
JSON document per fixed key (users, transactions, categories, ...).
The app reads and writes whole documents. This allows us to:
1. Keep data on the device in a single file
2. Use in-memory storage for testing
3. Mirror the same keys into Google Sheets if wanted

The interface is intentionally tiny - three raw string operations.
JSON (de)serialization lives in the base class so every backend
treats missing and unreadable values the same way.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class KeyValueStore(ABC):
    """
    Abstract interface for per-device key-value storage.

    Any storage implementation (local file, Google Sheets, etc.)
    must implement the three raw item methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the raw string stored under a key.

        Returns:
            The stored string, or None if the key is missing

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a raw string under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Read and parse the JSON document under a key.

        Missing keys and unreadable documents both yield `default`.
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning("storage_value_unreadable", key=key, error=str(e))
            return default

    def set_json(self, key: str, value: Any) -> None:
        """Serialize `value` as JSON and store it under a key."""
        self.set_item(key, json.dumps(value, ensure_ascii=False))


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
