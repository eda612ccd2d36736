"""
In-Memory Storage Implementation

Stores each tenant's dataset as serialized JSON, so every load hands out
an independent copy and a failed operation can never leak half-applied
changes into the stored document.
"""

import threading

import structlog

from finance_core.models.tenant import TenantFinanceData
from finance_core.services.storage.interface import (
    ConcurrentModificationError,
    FinanceStoreInterface,
    new_tenant_finance,
)


class InMemoryFinanceStore(FinanceStoreInterface):
    """Process-local store, used for tests and single-process tools."""

    def __init__(self):
        # tenant_id -> (version, dataset JSON)
        self._documents: dict[str, tuple[int, str]] = {}
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    def load_tenant_finance(self, tenant_id: str) -> TenantFinanceData:
        with self._lock:
            stored = self._documents.get(tenant_id)
        if stored is None:
            return new_tenant_finance(tenant_id)
        return TenantFinanceData.model_validate_json(stored[1])

    def save_tenant_finance(self, tenant_id: str, data: TenantFinanceData) -> None:
        with self._lock:
            stored_version = self._documents.get(tenant_id, (0, ""))[0]
            if data.version != stored_version:
                raise ConcurrentModificationError(tenant_id, data.version, stored_version)

            new_version = stored_version + 1
            saved = data.model_copy(update={"version": new_version})
            self._documents[tenant_id] = (new_version, saved.model_dump_json())

        self._logger.debug(
            "tenant_finance_saved",
            tenant_id=tenant_id,
            version=new_version,
        )

    def tenant_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._documents)
