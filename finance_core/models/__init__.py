"""
Data Models Package

This package contains all Pydantic models used by the finance core.
All data flowing through the system must conform to these schemas.
"""

from finance_core.models.accounts import (
    Account,
    AccountInput,
    AccountType,
)
from finance_core.models.common import (
    Money,
    round_money,
)
from finance_core.models.inventory import (
    InventoryItem,
    InventoryItemInput,
    InventoryLot,
    InventoryTransaction,
    InventoryTransactionInput,
    InventoryTransactionResult,
    InventoryTransactionType,
    InventoryValuationLine,
    InventoryValuationReport,
    LotConsumption,
    ValuationMethod,
)
from finance_core.models.journal import (
    JournalEntry,
    JournalEntryInput,
    JournalLine,
    JournalLineInput,
    LedgerEntry,
    PostingResult,
)
from finance_core.models.periods import (
    Period,
    PeriodInput,
    PeriodStatus,
)
from finance_core.models.reports import (
    BalanceSheet,
    BudgetCategory,
    BudgetCategoryInput,
    BudgetInput,
    BudgetPlan,
    Cashflow,
    CashflowLine,
    CashflowSnapshot,
    FinancialReportSnapshot,
    ProfitAndLoss,
    ReportType,
    StatementLine,
    TrialBalance,
    TrialBalanceRow,
)
from finance_core.models.tax import (
    TaxCalculationLine,
    TaxCategorySummary,
    TaxLineInput,
    TaxProfile,
    TaxProfileInput,
    TaxRate,
    TaxReport,
    TaxReportLine,
    TaxReturn,
    TaxSummary,
)
from finance_core.models.tenant import (
    TenantFinanceData,
    TenantSettings,
    TenantSettingsUpdate,
)
from finance_core.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Accounts
    "Account",
    "AccountInput",
    "AccountType",
    # Money
    "Money",
    "round_money",
    # Inventory
    "InventoryItem",
    "InventoryItemInput",
    "InventoryLot",
    "InventoryTransaction",
    "InventoryTransactionInput",
    "InventoryTransactionResult",
    "InventoryTransactionType",
    "InventoryValuationLine",
    "InventoryValuationReport",
    "LotConsumption",
    "ValuationMethod",
    # Journal & ledger
    "JournalEntry",
    "JournalEntryInput",
    "JournalLine",
    "JournalLineInput",
    "LedgerEntry",
    "PostingResult",
    # Periods
    "Period",
    "PeriodInput",
    "PeriodStatus",
    # Reports & budgets
    "BalanceSheet",
    "BudgetCategory",
    "BudgetCategoryInput",
    "BudgetInput",
    "BudgetPlan",
    "Cashflow",
    "CashflowLine",
    "CashflowSnapshot",
    "FinancialReportSnapshot",
    "ProfitAndLoss",
    "ReportType",
    "StatementLine",
    "TrialBalance",
    "TrialBalanceRow",
    # Tax
    "TaxCalculationLine",
    "TaxCategorySummary",
    "TaxLineInput",
    "TaxProfile",
    "TaxProfileInput",
    "TaxRate",
    "TaxReport",
    "TaxReportLine",
    "TaxReturn",
    "TaxSummary",
    # Tenant
    "TenantFinanceData",
    "TenantSettings",
    "TenantSettingsUpdate",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
