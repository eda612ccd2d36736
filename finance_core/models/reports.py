"""
Reporting Models

Statements are derived from ledger rows on demand. Snapshots capture a
generated statement with its timestamp and are never edited afterwards.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finance_core.models.common import ZERO, Money, utc_now


class ReportType(str, Enum):
    PROFIT_AND_LOSS = "PL"
    BALANCE_SHEET = "BS"
    CASHFLOW = "CF"
    TRIAL_BALANCE = "TB"


# =============================================================================
# STATEMENTS
# =============================================================================

class TrialBalanceRow(BaseModel):
    account: str
    debit: Money = ZERO
    credit: Money = ZERO
    net: Money = ZERO


class TrialBalance(BaseModel):
    rows: list[TrialBalanceRow] = Field(default_factory=list)
    total_debit: Money = ZERO
    total_credit: Money = ZERO

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


class StatementLine(BaseModel):
    """An account and its presented amount."""
    account: str
    amount: Money


class ProfitAndLoss(BaseModel):
    income: list[StatementLine] = Field(default_factory=list)
    expenses: list[StatementLine] = Field(default_factory=list)
    total_income: Money = ZERO
    total_expenses: Money = ZERO
    net_profit: Money = ZERO


class BalanceSheet(BaseModel):
    assets: list[StatementLine] = Field(default_factory=list)
    liabilities: list[StatementLine] = Field(default_factory=list)
    equity: list[StatementLine] = Field(default_factory=list)
    total_assets: Money = ZERO
    total_liabilities: Money = ZERO
    total_equity: Money = ZERO
    current_earnings: Money = Field(
        default=ZERO,
        description="Income less expenses not yet closed into equity"
    )

    @property
    def is_balanced(self) -> bool:
        return self.total_assets == (
            self.total_liabilities + self.total_equity + self.current_earnings
        )


class CashflowLine(BaseModel):
    account: str
    inflow: Money = ZERO
    outflow: Money = ZERO
    net: Money = ZERO


class Cashflow(BaseModel):
    """
    Cash movements by activity.

    Only the operating bucket is populated; investing and financing
    classification rules do not exist yet.
    """
    operating: list[CashflowLine] = Field(default_factory=list)
    investing: list[CashflowLine] = Field(default_factory=list)
    financing: list[CashflowLine] = Field(default_factory=list)
    net_change: Money = ZERO


# =============================================================================
# SNAPSHOTS
# =============================================================================

class FinancialReportSnapshot(BaseModel):
    """A generated statement, frozen at generation time."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    generated_at: datetime = Field(default_factory=utc_now)
    report_type: ReportType
    currency: str
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="The statement, serialized"
    )


class CashflowSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    generated_at: datetime = Field(default_factory=utc_now)
    currency: str
    operating: Money = ZERO
    investing: Money = ZERO
    financing: Money = ZERO
    net_change: Money = ZERO


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetCategory(BaseModel):
    name: str = Field(..., min_length=1)
    limit: Money = Field(..., ge=0)
    actual: Money = ZERO

    @property
    def remaining(self) -> Money:
        return self.limit - self.actual

    @property
    def is_over_budget(self) -> bool:
        return self.actual > self.limit


class BudgetCategoryInput(BaseModel):
    name: str = Field(..., min_length=1)
    limit: Money = Field(..., ge=0)


class BudgetInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    currency: Optional[str] = None
    period_start: date
    period_end: date
    categories: list[BudgetCategoryInput] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_period(self) -> 'BudgetInput':
        if self.period_end < self.period_start:
            raise ValueError("Budget period end cannot be before start")
        return self


class BudgetPlan(BaseModel):
    """Spending limits per category. Only actuals change after creation."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    name: str
    currency: str
    period_start: date
    period_end: date
    categories: list[BudgetCategory] = Field(default_factory=list)

    @property
    def total_limit(self) -> Money:
        return sum((c.limit for c in self.categories), ZERO)

    @property
    def total_actual(self) -> Money:
        return sum((c.actual for c in self.categories), ZERO)
