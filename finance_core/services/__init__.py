"""Services package."""

from finance_core.services.accounts import CHART_TEMPLATES, ChartOfAccountsService
from finance_core.services.budgets import BudgetService
from finance_core.services.closing import ClosingRequest, ClosingResult, ClosingService
from finance_core.services.inventory import InventoryService
from finance_core.services.journal import JournalService
from finance_core.services.periods import PeriodService, find_closed_period
from finance_core.services.reporting import ReportingService
from finance_core.services.settings import SettingsService
from finance_core.services.statements import (
    build_balance_sheet,
    build_cashflow,
    build_profit_and_loss,
    calculate_trial_balance,
    filter_entries,
)
from finance_core.services.storage import (
    ConcurrentModificationError,
    FinanceStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsFinanceStore,
    InMemoryFinanceStore,
    StorageError,
    StoreConnectionError,
)
from finance_core.services.tax import (
    TaxService,
    build_tax_report,
    build_tax_return,
    calculate_tax_lines,
    generate_tax_insights,
    summarize_tax,
)

__all__ = [
    # Ledger
    "JournalService",
    "PeriodService",
    "find_closed_period",
    "ClosingRequest",
    "ClosingResult",
    "ClosingService",
    # Chart
    "CHART_TEMPLATES",
    "ChartOfAccountsService",
    # Statements
    "ReportingService",
    "build_balance_sheet",
    "build_cashflow",
    "build_profit_and_loss",
    "calculate_trial_balance",
    "filter_entries",
    # Inventory
    "InventoryService",
    # Tax
    "TaxService",
    "build_tax_report",
    "build_tax_return",
    "calculate_tax_lines",
    "generate_tax_insights",
    "summarize_tax",
    # Settings & budgets
    "SettingsService",
    "BudgetService",
    # Storage
    "ConcurrentModificationError",
    "FinanceStoreInterface",
    "GoogleSheetsClient",
    "GoogleSheetsFinanceStore",
    "InMemoryFinanceStore",
    "StorageError",
    "StoreConnectionError",
]
