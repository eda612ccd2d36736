"""
Tax Models

Covers per-line tax calculation, category summaries, ledger-based tax
reports and the period "return" summary built on top of them.

DESIGN DECISION: Rates are percentages (10 means 10%), never fractions.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from finance_core.models.common import ZERO, Money, utc_now


class TaxRate(BaseModel):
    """A named rate within a tax profile."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(
        ...,
        min_length=1,
        description="Matched case-insensitively against ledger tax categories"
    )
    rate: Decimal = Field(
        ...,
        ge=0,
        description="Rate as a percentage"
    )
    inclusive: bool = Field(
        default=False,
        description="True when amounts already contain the tax"
    )
    account: Optional[str] = Field(
        default=None,
        description="Account the collected tax is posted to"
    )


class TaxProfileInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    jurisdiction: str = Field(..., min_length=1)
    rates: list[TaxRate] = Field(default_factory=list)


class TaxProfile(BaseModel):
    """A jurisdiction's set of rates."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    name: str
    jurisdiction: str
    rates: list[TaxRate] = Field(default_factory=list)

    def find_rate(self, category: str) -> Optional[TaxRate]:
        """Look up a rate by case-insensitive name."""
        wanted = category.strip().lower()
        for rate in self.rates:
            if rate.name.strip().lower() == wanted:
                return rate
        return None


class TaxLineInput(BaseModel):
    """An ad-hoc amount to compute tax for."""

    category: str = Field(..., min_length=1)
    rate: Decimal = Field(..., ge=0)
    amount: Money
    inclusive: bool = False


class TaxCalculationLine(BaseModel):
    """Result of computing tax on one amount."""
    model_config = ConfigDict(frozen=True)

    category: str
    rate: Decimal
    inclusive: bool
    amount: Money
    taxable_amount: Money
    tax_amount: Money

    @property
    def gross_amount(self) -> Money:
        return self.taxable_amount + self.tax_amount


class TaxCategorySummary(BaseModel):
    taxable: Money = ZERO
    tax: Money = ZERO
    rate: Decimal = Decimal("0")


class TaxSummary(BaseModel):
    """Tax lines aggregated by category."""

    categories: dict[str, TaxCategorySummary] = Field(default_factory=dict)
    total_taxable: Money = ZERO
    total_tax: Money = ZERO


class TaxReportLine(BaseModel):
    category: str
    taxable: Money
    rate: Decimal
    tax: Money
    entry_count: int = Field(ge=0)


class TaxReport(BaseModel):
    """Ledger activity grouped by tax category."""

    generated_at: datetime = Field(default_factory=utc_now)
    profile_id: Optional[UUID] = None
    profile_name: Optional[str] = None
    lines: list[TaxReportLine] = Field(default_factory=list)
    total_taxable: Money = ZERO
    total_tax: Money = ZERO


class TaxReturn(BaseModel):
    """
    A tax report wrapped with its reporting period.

    This is a category-level summary for review, not a lodgement form.
    """

    period_start: date
    period_end: date
    report: TaxReport
    notes: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=utc_now)
