"""
Tests for the pure statement builders.

Ledger rows are built directly, without posting, so each builder is
tested in isolation.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from finance_core.models import AccountType, LedgerEntry
from finance_core.services.statements import (
    build_balance_sheet,
    build_cashflow,
    build_profit_and_loss,
    calculate_trial_balance,
    filter_entries,
)


def row(account, debit=0, credit=0, on=date(2024, 1, 15), **kwargs) -> LedgerEntry:
    return LedgerEntry(
        date=on,
        account=account,
        debit=Decimal(str(debit)),
        credit=Decimal(str(credit)),
        currency="AUD",
        journal_id=uuid4(),
        **kwargs,
    )


@pytest.fixture
def ledger():
    """Capital injection, a sale, rent paid and a supplier bill."""
    return [
        row("Asset:Bank:Operating", debit=1000),
        row("Equity:OwnerCapital", credit=1000),
        row("Asset:Bank:Operating", debit=500, tags=["cash"]),
        row("Income:Sales", credit=500),
        row("Expense:Rent", debit=300),
        row("Asset:Bank:Operating", credit=300),
        row("Expense:Supplies", debit=40),
        row("Liability:AccountsPayable", credit=40),
    ]


class TestFilterEntries:
    """Tests for ledger filtering."""

    def test_inclusive_bounds(self):
        """Test that both bounds are inclusive."""
        rows = [row("Income:Sales", credit=1, on=date(2024, 1, d)) for d in (1, 2, 3)]
        kept = filter_entries(rows, date_from=date(2024, 1, 2), date_to=date(2024, 1, 3))
        assert [r.date.day for r in kept] == [2, 3]

    def test_open_ended(self):
        """Test that omitted bounds keep everything."""
        rows = [row("Income:Sales", credit=1), row("Expense:Rent", debit=1)]
        assert len(filter_entries(rows)) == 2
        assert len(filter_entries(rows, account="Expense:Rent")) == 1


class TestTrialBalance:
    """Tests for the trial balance."""

    def test_nets_sum_to_zero(self, ledger):
        """Test that a balanced ledger nets to zero."""
        tb = calculate_trial_balance(ledger)

        assert sum(r.net for r in tb.rows) == Decimal("0")
        assert tb.is_balanced
        assert tb.total_debit == Decimal("1840.00")

    def test_rows_per_account(self, ledger):
        """Test one row per account with debit minus credit."""
        tb = calculate_trial_balance(ledger)
        bank = next(r for r in tb.rows if r.account == "Asset:Bank:Operating")

        assert bank.debit == Decimal("1500.00")
        assert bank.credit == Decimal("300.00")
        assert bank.net == Decimal("1200.00")


class TestProfitAndLoss:
    """Tests for the P&L statement."""

    def test_income_positive_and_net_profit(self, ledger):
        """Test that income is negated and expenses shown at net."""
        pl = build_profit_and_loss(ledger)

        assert pl.income[0].amount == Decimal("500.00")
        assert pl.total_expenses == Decimal("340.00")
        assert pl.net_profit == Decimal("160.00")

    def test_typed_account_type_wins_over_prefix(self):
        """Test that a typed row is classified by its account_type."""
        rows = [row("Sales:Online", credit=100, account_type=AccountType.INCOME)]
        assert build_profit_and_loss(rows).total_income == Decimal("100.00")

    def test_lowercase_prefix_is_not_classified(self):
        """Test that prefix matching is case-sensitive."""
        rows = [row("income:Sales", credit=100)]
        assert build_profit_and_loss(rows).income == []


class TestBalanceSheet:
    """Tests for the balance sheet."""

    def test_sections_and_balance(self, ledger):
        """Test that assets equal liabilities, equity and current earnings."""
        bs = build_balance_sheet(ledger)

        assert bs.total_assets == Decimal("1200.00")
        assert bs.total_liabilities == Decimal("40.00")
        assert bs.total_equity == Decimal("1000.00")
        assert bs.current_earnings == Decimal("160.00")
        assert bs.is_balanced

    def test_sign_follows_normal_balance(self):
        """Test that a typed liability with a debit balance shows negative."""
        rows = [
            row("Loan:Director", debit=75, account_type=AccountType.LIABILITY),
            row("Float:Till", debit=20, account_type=AccountType.ASSET),
        ]
        bs = build_balance_sheet(rows)

        assert AccountType.LIABILITY.is_credit_normal
        assert [line.amount for line in bs.liabilities] == [Decimal("-75.00")]
        assert [line.amount for line in bs.assets] == [Decimal("20.00")]


class TestCashflow:
    """Tests for the cashflow stub."""

    def test_only_cash_rows_in_operating(self, ledger):
        """Test that rows tagged cash or under Cash: are included."""
        rows = ledger + [row("Cash:Float", debit=25), row("Income:Other", credit=25)]
        cf = build_cashflow(rows)

        accounts = {line.account for line in cf.operating}
        assert accounts == {"Asset:Bank:Operating", "Cash:Float"}
        assert cf.investing == []
        assert cf.financing == []
        assert cf.net_change == Decimal("525.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
