"""
Finance Core Orchestrator

Wires every service to one tenant dataset store and exposes them as a
single facade.

DESIGN DECISION: All services share the same store instance. Each service
operation loads the tenant dataset, changes it and saves it once, so the
facade itself holds no tenant state.
"""

from typing import Optional

import structlog

from finance_core.config import get_settings, validate_all_settings
from finance_core.observability import configure_logging
from finance_core.services.accounts import ChartOfAccountsService
from finance_core.services.budgets import BudgetService
from finance_core.services.closing import ClosingService
from finance_core.services.inventory import InventoryService
from finance_core.services.journal import JournalService
from finance_core.services.periods import PeriodService
from finance_core.services.reporting import ReportingService
from finance_core.services.settings import SettingsService
from finance_core.services.storage import (
    FinanceStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsFinanceStore,
    InMemoryFinanceStore,
)
from finance_core.services.tax import TaxService
from finance_core.validation import JournalValidator

logger = structlog.get_logger(__name__)


class FinanceCore:
    """
    Entry point for every finance operation.

    Services:
    - journals: post and list journals, query the ledger
    - accounts: chart of accounts
    - periods / closing: period registry and closing entries
    - reporting: statements and report snapshots
    - inventory: stock movements and valuation
    - tax: tax profiles, reports and returns
    - settings / budgets: tenant preferences and spending limits
    """

    def __init__(
        self,
        store: FinanceStoreInterface,
        validator: Optional[JournalValidator] = None,
    ):
        self.store = store
        self.journals = JournalService(store, validator)
        self.accounts = ChartOfAccountsService(store)
        self.periods = PeriodService(store)
        self.closing = ClosingService(store, self.journals)
        self.reporting = ReportingService(store)
        self.inventory = InventoryService(store)
        self.tax = TaxService(store)
        self.settings = SettingsService(store)
        self.budgets = BudgetService(store)


def create_store(backend: Optional[str] = None) -> FinanceStoreInterface:
    """Build the store named by ``backend`` or by FINANCE_STORAGE_BACKEND."""
    backend = backend or get_settings().finance.storage_backend

    if backend == "google_sheets":
        return GoogleSheetsFinanceStore(GoogleSheetsClient())
    if backend == "memory":
        return InMemoryFinanceStore()
    raise ValueError(f"Unsupported storage backend: {backend}")


def create_finance_core(
    store: Optional[FinanceStoreInterface] = None,
    setup_logging: bool = True,
) -> FinanceCore:
    """
    Factory function to create a fully wired finance core.

    Args:
        store: Dataset store to use. Built from settings when omitted.
        setup_logging: Configure structlog from LOG_* settings first.

    Settings are checked at startup and each invalid section is logged
    as a warning.
    """
    if setup_logging:
        configure_logging()

    status = validate_all_settings()
    for section, valid in status.items():
        if valid is False:
            logger.warning(
                "settings_invalid",
                section=section,
                error=status.get(f"{section}_error"),
            )

    store = store or create_store()
    logger.info("finance_core_created", store=type(store).__name__)
    return FinanceCore(store)
