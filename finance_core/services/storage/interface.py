"""
Abstract Storage Interface

DESIGN DECISION: The core touches persistence through exactly two calls:
load a tenant's whole dataset, and save it back. This allows us to:
1. Keep Google Sheets, a database or a document store interchangeable
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Serializing access per tenant is the store's job. Implementations must
reject a save whose ``version`` no longer matches the stored dataset
instead of silently overwriting a concurrent write.
"""

from abc import ABC, abstractmethod

from finance_core.config import get_settings
from finance_core.models.inventory import ValuationMethod
from finance_core.models.tenant import TenantFinanceData, TenantSettings


class FinanceStoreInterface(ABC):
    """
    Abstract interface for tenant dataset storage.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load_tenant_finance(self, tenant_id: str) -> TenantFinanceData:
        """
        Load a tenant's full financial dataset.

        Args:
            tenant_id: The tenant whose data to load

        Returns:
            The stored dataset, or an initialized empty one on first access

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save_tenant_finance(self, tenant_id: str, data: TenantFinanceData) -> None:
        """
        Replace a tenant's full financial dataset.

        Args:
            tenant_id: The tenant whose data to replace
            data: The complete dataset, as previously loaded and then mutated

        Raises:
            ConcurrentModificationError: If the stored version moved on since load
            StorageError: If the write fails
        """
        pass


def new_tenant_finance(tenant_id: str) -> TenantFinanceData:
    """Build the empty dataset a tenant starts with."""
    defaults = get_settings().finance
    return TenantFinanceData(
        tenant_id=tenant_id,
        settings=TenantSettings(
            valuation_method=ValuationMethod(defaults.default_valuation_method),
            default_currency=defaults.default_currency,
        ),
    )


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConcurrentModificationError(StorageError):
    """The dataset was saved by someone else after it was loaded."""

    def __init__(self, tenant_id: str, expected_version: int, stored_version: int):
        super().__init__(
            f"Tenant {tenant_id} was modified concurrently "
            f"(loaded version {expected_version}, stored version {stored_version})"
        )
        self.tenant_id = tenant_id
        self.expected_version = expected_version
        self.stored_version = stored_version


class StoreConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
