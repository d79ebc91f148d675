"""Services package."""

from wealthtrack.services.storage import (
    ConnectionError,
    FinanceRepository,
    GoogleSheetsClient,
    GoogleSheetsStore,
    InMemoryStore,
    KeyValueStore,
    LocalJsonStore,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "FinanceRepository",
    "GoogleSheetsClient",
    "GoogleSheetsStore",
    "InMemoryStore",
    "KeyValueStore",
    "LocalJsonStore",
    "NotFoundError",
    "StorageError",
]
