"""
Tests for journal posting and the ledger it produces.

Every test runs against the in-memory store, so a failed posting can be
checked by reloading the tenant dataset.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_core.exceptions import PeriodClosedError, ValidationError
from finance_core.models import (
    AccountInput,
    AccountType,
    JournalEntryInput,
    JournalLineInput,
    PeriodInput,
)
from tests.conftest import make_journal


class TestPostJournal:
    """Tests for successful postings."""

    def test_balanced_journal_creates_one_row_per_line(self, core, tenant_id):
        """Test that each line becomes exactly one ledger row."""
        posting = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 1),
            ("Asset:Bank:Operating", "150.00", 0),
            ("Income:Sales", 0, "150.00"),
        ))

        assert len(posting.ledger_entries) == 2
        assert {row.account for row in posting.ledger_entries} == {
            "Asset:Bank:Operating",
            "Income:Sales",
        }
        assert all(row.journal_id == posting.journal.id for row in posting.ledger_entries)
        assert posting.journal.total_debit == posting.journal.total_credit == Decimal("150.00")

    def test_posting_persists_journal_and_rows(self, core, store, tenant_id):
        """Test that the dataset is saved once with journal and rows."""
        core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 1),
            ("Asset:Bank:Operating", 80, 0),
            ("Income:Sales", 0, 80),
        ))

        data = store.load_tenant_finance(tenant_id)
        assert len(data.journals) == 1
        assert len(data.ledgers) == 2
        assert data.version == 1

    def test_newest_journal_first(self, core, tenant_id):
        """Test that journals and rows are prepended."""
        first = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 1), ("Asset:Bank:Operating", 10, 0), ("Income:Sales", 0, 10),
        ))
        second = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 2), ("Asset:Bank:Operating", 20, 0), ("Income:Sales", 0, 20),
        ))

        journals = core.journals.list_journals(tenant_id)
        assert [j.id for j in journals] == [second.journal.id, first.journal.id]

        ledger = core.journals.list_ledger_entries(tenant_id)
        assert ledger[0].journal_id == second.journal.id

    def test_rows_carry_currency_tax_category_and_tags(self, core, tenant_id):
        """Test that line attributes are copied onto the ledger row."""
        entry = JournalEntryInput(
            date=date(2024, 3, 1),
            lines=[
                JournalLineInput(
                    account="Asset:Bank:Operating",
                    debit=Decimal("110"),
                    tags=["cash"],
                ),
                JournalLineInput(
                    account="Income:Sales",
                    credit=Decimal("110"),
                    tax_category="GST",
                ),
            ],
        )
        posting = core.journals.post_journal(tenant_id, entry)

        bank, sales = posting.ledger_entries
        assert bank.tags == ["cash"]
        assert sales.tax_category == "GST"
        assert bank.currency == sales.currency == "AUD"

    def test_account_type_from_chart_then_prefix(self, core, tenant_id):
        """Test that the chart classification wins over the code prefix."""
        core.accounts.upsert_account(tenant_id, AccountInput(
            code="Clearing:Stripe",
            name="Stripe clearing",
            type=AccountType.ASSET,
        ))
        posting = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 1),
            ("Clearing:Stripe", 50, 0),
            ("Income:Sales", 0, 50),
        ))

        types = {row.account: row.account_type for row in posting.ledger_entries}
        assert types["Clearing:Stripe"] == AccountType.ASSET
        assert types["Income:Sales"] == AccountType.INCOME

    def test_amounts_rounded_to_cents(self, core, tenant_id):
        """Test that amounts are rounded half-up to 2 places."""
        posting = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 3, 1),
            ("Asset:Bank:Operating", "10.005", 0),
            ("Income:Sales", 0, "10.005"),
        ))
        assert posting.ledger_entries[0].debit == Decimal("10.01")


class TestJournalValidation:
    """Tests for rejected postings."""

    def test_single_unbalanced_line_rejected(self, core, store, tenant_id):
        """Test that a lone debit is rejected and nothing is written."""
        with pytest.raises(ValidationError) as exc_info:
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 3, 1),
                ("Asset:Bank:Operating", 100, 0),
            ))

        assert any(issue.issue_type == "unbalanced" for issue in exc_info.value.issues)
        assert store.tenant_ids() == []

    def test_empty_journal_rejected(self, core, tenant_id):
        """Test that a journal needs at least one line."""
        with pytest.raises(ValidationError):
            core.journals.post_journal(tenant_id, JournalEntryInput(date=date(2024, 3, 1)))

    def test_negative_amount_rejected(self, core, tenant_id):
        """Test that negative debits are rejected."""
        with pytest.raises(ValidationError, match="negative debit"):
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 3, 1),
                ("Asset:Bank:Operating", -10, 0),
                ("Income:Sales", 0, -10),
            ))

    def test_two_sided_line_rejected(self, core, tenant_id):
        """Test that a line cannot carry a debit and a credit."""
        with pytest.raises(ValidationError) as exc_info:
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 3, 1),
                ("Asset:Bank:Operating", 10, 10),
            ))
        assert exc_info.value.issues[0].issue_type == "two_sided"

    def test_missing_account_rejected(self, core, tenant_id):
        """Test that every line needs an account."""
        with pytest.raises(ValidationError, match="no account"):
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 3, 1),
                ("", 10, 0),
                ("Income:Sales", 0, 10),
            ))


class TestPeriodGuard:
    """Tests for postings into closed periods."""

    def test_closed_period_blocks_posting(self, core, store, tenant_id):
        """Test that journals and ledger are unchanged after a refused posting."""
        core.journals.post_journal(tenant_id, make_journal(
            date(2024, 1, 10), ("Asset:Bank:Operating", 10, 0), ("Income:Sales", 0, 10),
        ))
        period = core.periods.create_period(tenant_id, PeriodInput(
            name="Jan 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        ))
        core.periods.close_period(tenant_id, period.id)

        before = store.load_tenant_finance(tenant_id)
        with pytest.raises(PeriodClosedError, match="Jan 2024"):
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 1, 31), ("Asset:Bank:Operating", 5, 0), ("Income:Sales", 0, 5),
            ))
        after = store.load_tenant_finance(tenant_id)

        assert len(after.journals) == len(before.journals)
        assert len(after.ledgers) == len(before.ledgers)

    def test_posting_outside_closed_period_allowed(self, core, tenant_id):
        """Test that the guard only covers the period's own dates."""
        period = core.periods.create_period(tenant_id, PeriodInput(
            name="Jan 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        ))
        core.periods.close_period(tenant_id, period.id)

        posting = core.journals.post_journal(tenant_id, make_journal(
            date(2024, 2, 1), ("Asset:Bank:Operating", 5, 0), ("Income:Sales", 0, 5),
        ))
        assert posting.journal.date == date(2024, 2, 1)

    def test_reopened_period_accepts_postings(self, core, tenant_id):
        """Test that reopening lifts the guard."""
        period = core.periods.create_period(tenant_id, PeriodInput(
            name="Jan 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        ))
        core.periods.close_period(tenant_id, period.id)
        core.periods.reopen_period(tenant_id, period.id)

        core.journals.post_journal(tenant_id, make_journal(
            date(2024, 1, 15), ("Asset:Bank:Operating", 5, 0), ("Income:Sales", 0, 5),
        ))
        assert len(core.journals.list_journals(tenant_id)) == 1


class TestLedgerQueries:
    """Tests for listing and resetting the ledger."""

    def test_filter_by_account_and_dates(self, core, tenant_id):
        """Test inclusive date bounds and account filter."""
        for day in (1, 15, 31):
            core.journals.post_journal(tenant_id, make_journal(
                date(2024, 1, day), ("Asset:Bank:Operating", day, 0), ("Income:Sales", 0, day),
            ))

        rows = core.journals.list_ledger_entries(
            tenant_id,
            account="Income:Sales",
            date_from=date(2024, 1, 15),
            date_to=date(2024, 1, 31),
        )
        assert sorted(row.credit for row in rows) == [Decimal("15.00"), Decimal("31.00")]

    def test_reset_ledger(self, core, tenant_id):
        """Test that reset clears journals and ledger rows."""
        core.journals.post_journal(tenant_id, make_journal(
            date(2024, 1, 1), ("Asset:Bank:Operating", 1, 0), ("Income:Sales", 0, 1),
        ))
        core.journals.reset_ledger(tenant_id)

        assert core.journals.list_journals(tenant_id) == []
        assert core.journals.list_ledger_entries(tenant_id) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
