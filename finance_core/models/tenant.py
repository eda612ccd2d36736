"""
Tenant Finance Aggregate

DESIGN DECISION: A tenant's whole financial dataset is one document.
It is loaded, mutated in memory and saved back in a single call, so an
operation either lands completely or not at all.

The ``version`` counter is owned by the store: it lets a store reject a
save that was based on a stale load.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_core.models.accounts import Account
from finance_core.models.inventory import (
    InventoryItem,
    InventoryLot,
    InventoryTransaction,
    ValuationMethod,
)
from finance_core.models.journal import JournalEntry, LedgerEntry
from finance_core.models.periods import Period
from finance_core.models.reports import (
    BudgetPlan,
    CashflowSnapshot,
    FinancialReportSnapshot,
)
from finance_core.models.tax import TaxProfile


class TenantSettings(BaseModel):
    """Per-tenant accounting preferences."""

    valuation_method: ValuationMethod = ValuationMethod.FIFO
    default_currency: str = Field(
        default="AUD",
        min_length=3,
        max_length=3
    )


class TenantSettingsUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    valuation_method: Optional[ValuationMethod] = None
    default_currency: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3
    )


class TenantFinanceData(BaseModel):
    """Everything one tenant owns. Never references another tenant."""

    tenant_id: str = Field(..., min_length=1)
    version: int = Field(
        default=0,
        ge=0,
        description="Store-managed revision used for optimistic concurrency"
    )
    settings: TenantSettings = Field(default_factory=TenantSettings)

    periods: list[Period] = Field(default_factory=list)
    chart: list[Account] = Field(default_factory=list)
    ledgers: list[LedgerEntry] = Field(default_factory=list)
    journals: list[JournalEntry] = Field(default_factory=list)
    tax_profiles: list[TaxProfile] = Field(default_factory=list)

    inventory_items: list[InventoryItem] = Field(default_factory=list)
    inventory_lots: list[InventoryLot] = Field(default_factory=list)
    inventory_transactions: list[InventoryTransaction] = Field(default_factory=list)

    budgets: list[BudgetPlan] = Field(default_factory=list)
    cashflows: list[CashflowSnapshot] = Field(default_factory=list)
    reports: list[FinancialReportSnapshot] = Field(default_factory=list)

    def find_account(self, code: str) -> Optional[Account]:
        for account in self.chart:
            if account.code == code:
                return account
        return None

    def find_item(self, sku: str) -> Optional[InventoryItem]:
        for item in self.inventory_items:
            if item.sku == sku:
                return item
        return None
