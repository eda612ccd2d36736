"""
Storage Services Package

Provides the abstract tenant dataset store and its implementations.
Google Sheets and in-memory backends are included; others can be swapped in.
"""

from finance_core.services.storage.interface import (
    ConcurrentModificationError,
    FinanceStoreInterface,
    StorageError,
    StoreConnectionError,
    new_tenant_finance,
)
from finance_core.services.storage.memory import InMemoryFinanceStore
from finance_core.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsFinanceStore,
)

__all__ = [
    # Interfaces
    "FinanceStoreInterface",
    "new_tenant_finance",
    # Exceptions
    "ConcurrentModificationError",
    "StorageError",
    "StoreConnectionError",
    # Implementations
    "InMemoryFinanceStore",
    "GoogleSheetsClient",
    "GoogleSheetsFinanceStore",
]
