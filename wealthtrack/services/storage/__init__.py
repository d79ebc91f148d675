"""
Storage Services Package

Provides the abstract key-value interface, its implementations and the
repository that gives typed access to users, transactions and categories.
The local JSON file is the default backend; Google Sheets is optional.
"""

from wealthtrack.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from wealthtrack.services.storage.local import InMemoryStore, LocalJsonStore
from wealthtrack.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsStore,
)
from wealthtrack.services.storage.repository import (
    FinanceRepository,
    default_categories,
    migrate_categories,
)

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "LocalJsonStore",
    "GoogleSheetsClient",
    "GoogleSheetsStore",
    # Repository
    "FinanceRepository",
    "default_categories",
    "migrate_categories",
]
