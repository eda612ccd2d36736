"""
Tax Engine

Computes tax on ad-hoc amounts, summarizes it by category, and builds
category-level reports and returns from ledger rows.

Rates are percentages. Inclusive amounts already contain the tax, so the
taxable base is backed out: ``taxable = amount / (1 + rate/100)``.
Exclusive amounts are the base: ``tax = amount * rate / 100``.

Insights are advisory strings only; nothing here raises for unusual data.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from finance_core.exceptions import NotFoundError
from finance_core.models.common import ZERO, round_money
from finance_core.models.journal import LedgerEntry
from finance_core.models.tax import (
    TaxCalculationLine,
    TaxCategorySummary,
    TaxLineInput,
    TaxProfile,
    TaxProfileInput,
    TaxReport,
    TaxReportLine,
    TaxReturn,
    TaxSummary,
)
from finance_core.services.base import TenantDatasetService
from finance_core.services.statements import filter_entries

HUNDRED = Decimal("100")

# Share of total tax above which one category is called out
DOMINANT_SHARE = Decimal("0.6")

TAX_RETURN_NOTES = [
    "Figures are grouped by the tax category recorded on each ledger entry.",
    "Entries without a tax category are excluded from this return.",
    "Review the figures with a registered tax agent before lodging.",
]


def calculate_tax_line(line: TaxLineInput) -> TaxCalculationLine:
    if line.inclusive:
        taxable = round_money(line.amount / (1 + line.rate / HUNDRED))
        tax = line.amount - taxable
    else:
        taxable = line.amount
        tax = round_money(line.amount * line.rate / HUNDRED)

    return TaxCalculationLine(
        category=line.category,
        rate=line.rate,
        inclusive=line.inclusive,
        amount=line.amount,
        taxable_amount=taxable,
        tax_amount=tax,
    )


def calculate_tax_lines(lines: Iterable[TaxLineInput]) -> list[TaxCalculationLine]:
    return [calculate_tax_line(line) for line in lines]


def summarize_tax(lines: Iterable[TaxCalculationLine]) -> TaxSummary:
    """
    Aggregate calculated lines by category.

    A category with a single rate reports that rate. One that mixes rates
    reports the taxable-weighted average of its line rates, so cent rounding
    of small tax amounts never skews it.
    """
    taxable: dict[str, Decimal] = defaultdict(lambda: ZERO)
    tax: dict[str, Decimal] = defaultdict(lambda: ZERO)
    rates: dict[str, set[Decimal]] = defaultdict(set)
    weighted: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for line in lines:
        taxable[line.category] += line.taxable_amount
        tax[line.category] += line.tax_amount
        rates[line.category].add(line.rate)
        weighted[line.category] += line.rate * line.taxable_amount

    categories = {}
    for category in taxable:
        if len(rates[category]) == 1:
            rate = next(iter(rates[category]))
        elif taxable[category]:
            rate = round_money(weighted[category] / taxable[category])
        else:
            rate = max(rates[category])
        categories[category] = TaxCategorySummary(
            taxable=taxable[category],
            tax=tax[category],
            rate=rate,
        )

    return TaxSummary(
        categories=categories,
        total_taxable=sum(taxable.values(), ZERO),
        total_tax=sum(tax.values(), ZERO),
    )


def generate_tax_insights(
    lines: Iterable[TaxCalculationLine],
    ledger_entries: Optional[Iterable[LedgerEntry]] = None,
) -> list[str]:
    """Advisory observations about tax lines and, optionally, the ledger."""
    lines = list(lines)
    insights = []

    if ledger_entries is not None:
        uncategorized = sum(1 for entry in ledger_entries if not entry.tax_category)
        if uncategorized:
            insights.append(
                f"There are {uncategorized} ledger entries without a tax category. "
                "Tag them to improve return tracking."
            )

    if not lines:
        insights.append("No taxable lines yet. Add transactions with tax categories to see insights.")
        return insights

    summary = summarize_tax(lines)

    for category in sorted(summary.categories):
        if not any(line.rate for line in lines if line.category == category):
            insights.append(
                f"Category '{category}' is taxed at 0%. Confirm it is exempt or GST-free."
            )

    if len(summary.categories) > 1 and summary.total_tax > 0:
        category, figures = max(summary.categories.items(), key=lambda item: item[1].tax)
        share = figures.tax / summary.total_tax
        if share >= DOMINANT_SHARE:
            insights.append(
                f"Category '{category}' accounts for {round(share * HUNDRED)}% of tax. "
                "Check its rate and categorization first."
            )

    return insights


def build_tax_report(
    entries: Iterable[LedgerEntry],
    profile: Optional[TaxProfile] = None,
) -> TaxReport:
    """
    Group ledger rows by tax category.

    The taxable figure per category is the absolute net of its rows. The
    rate comes from the profile rate with the same name (any case);
    categories without one are reported at 0%.
    """
    nets: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for entry in entries:
        if not entry.tax_category:
            continue
        nets[entry.tax_category] += entry.net
        counts[entry.tax_category] += 1

    lines = []
    for category in sorted(nets):
        rate = profile.find_rate(category) if profile else None
        calculated = calculate_tax_line(TaxLineInput(
            category=category,
            rate=rate.rate if rate else Decimal("0"),
            amount=abs(nets[category]),
            inclusive=rate.inclusive if rate else False,
        ))
        lines.append(TaxReportLine(
            category=category,
            taxable=calculated.taxable_amount,
            rate=calculated.rate,
            tax=calculated.tax_amount,
            entry_count=counts[category],
        ))

    return TaxReport(
        profile_id=profile.id if profile else None,
        profile_name=profile.name if profile else None,
        lines=lines,
        total_taxable=sum((line.taxable for line in lines), ZERO),
        total_tax=sum((line.tax for line in lines), ZERO),
    )


def build_tax_return(
    entries: Iterable[LedgerEntry],
    profile: Optional[TaxProfile],
    period_start: date,
    period_end: date,
) -> TaxReturn:
    window = filter_entries(entries, date_from=period_start, date_to=period_end)
    return TaxReturn(
        period_start=period_start,
        period_end=period_end,
        report=build_tax_report(window, profile),
        notes=list(TAX_RETURN_NOTES),
    )


class TaxService(TenantDatasetService):
    """Tax profiles plus ledger-based reports for a tenant."""

    def list_profiles(self, tenant_id: str) -> list[TaxProfile]:
        return list(self._load(tenant_id).tax_profiles)

    def create_profile(self, tenant_id: str, profile_input: TaxProfileInput) -> TaxProfile:
        data = self._load(tenant_id)
        profile = TaxProfile(**profile_input.model_dump())
        data.tax_profiles.insert(0, profile)
        self._save(data)

        self._log(tenant_id).info(
            "tax_profile_created",
            profile_id=str(profile.id),
            jurisdiction=profile.jurisdiction,
            rates=len(profile.rates),
        )
        return profile

    def _find_profile(self, profiles: list[TaxProfile], profile_id: Optional[UUID]) -> Optional[TaxProfile]:
        """The requested profile, or the most recent one when none is named."""
        if profile_id is None:
            return profiles[0] if profiles else None
        for profile in profiles:
            if profile.id == profile_id:
                return profile
        raise NotFoundError("Tax profile", str(profile_id))

    def report_for_tenant(
        self,
        tenant_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        profile_id: Optional[UUID] = None,
    ) -> TaxReport:
        data = self._load(tenant_id)
        profile = self._find_profile(data.tax_profiles, profile_id)
        entries = filter_entries(data.ledgers, date_from=date_from, date_to=date_to)
        return build_tax_report(entries, profile)

    def return_for_tenant(
        self,
        tenant_id: str,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        profile_id: Optional[UUID] = None,
    ) -> TaxReturn:
        """Tax return for a window, by default 1 January this year to today."""
        today = date.today()
        period_start = period_start or date(today.year, 1, 1)
        period_end = period_end or today

        data = self._load(tenant_id)
        profile = self._find_profile(data.tax_profiles, profile_id)
        return build_tax_return(data.ledgers, profile, period_start, period_end)

    def insights_for_tenant(self, tenant_id: str) -> list[str]:
        """Insights over the tenant's ledger using its most recent profile."""
        data = self._load(tenant_id)
        report = build_tax_report(data.ledgers, self._find_profile(data.tax_profiles, None))
        lines = [
            TaxCalculationLine(
                category=line.category,
                rate=line.rate,
                inclusive=False,
                amount=line.taxable,
                taxable_amount=line.taxable,
                tax_amount=line.tax,
            )
            for line in report.lines
        ]
        return generate_tax_insights(lines, data.ledgers)
