"""
Shared plumbing for services that read and write a tenant's dataset.

Every operation follows the same shape: load the whole dataset, change it
in memory, save it once. Raising anywhere before ``_save`` leaves the
stored dataset untouched.
"""

from finance_core.models.tenant import TenantFinanceData
from finance_core.observability import bind_tenant
from finance_core.services.storage import FinanceStoreInterface


class TenantDatasetService:
    """Base class holding the store a service loads from and saves to."""

    def __init__(self, store: FinanceStoreInterface):
        self._store = store

    def _load(self, tenant_id: str) -> TenantFinanceData:
        return self._store.load_tenant_finance(tenant_id)

    def _save(self, data: TenantFinanceData) -> None:
        self._store.save_tenant_finance(data.tenant_id, data)

    def _log(self, tenant_id: str):
        return bind_tenant(tenant_id, service=type(self).__name__)
