"""
Journal & Ledger Service

The single write path into the ledger.

FLOW:
1. Validate lines and balance (ValidationError, nothing written)
2. Check the date against closed periods (PeriodClosedError, nothing written)
3. Build the journal and one ledger row per line
4. Prepend both to the dataset and save once

``apply_journal`` performs steps 1-4 minus the save, so other services
(closing) can combine a posting with their own changes in one save.
"""

from datetime import date
from typing import Optional

from finance_core.exceptions import PeriodClosedError, ValidationError
from finance_core.models.accounts import AccountType
from finance_core.models.journal import (
    JournalEntry,
    JournalEntryInput,
    JournalLine,
    LedgerEntry,
    PostingResult,
)
from finance_core.models.tenant import TenantFinanceData
from finance_core.services.base import TenantDatasetService
from finance_core.services.periods import find_closed_period
from finance_core.services.statements import filter_entries
from finance_core.services.storage import FinanceStoreInterface
from finance_core.validation import JournalValidator


class JournalService(TenantDatasetService):
    """Validates and posts journal entries; lists journals and ledger rows."""

    def __init__(
        self,
        store: FinanceStoreInterface,
        validator: Optional[JournalValidator] = None,
    ):
        super().__init__(store)
        self._validator = validator or JournalValidator()

    def _resolve_account_type(
        self,
        data: TenantFinanceData,
        code: str,
    ) -> Optional[AccountType]:
        account = data.find_account(code)
        if account is not None:
            return account.type
        return AccountType.from_code(code)

    def apply_journal(
        self,
        data: TenantFinanceData,
        entry: JournalEntryInput,
    ) -> PostingResult:
        """
        Validate and post a journal into an in-memory dataset.

        The caller is responsible for saving ``data``.

        Raises:
            ValidationError: If the entry is malformed or unbalanced
            PeriodClosedError: If the entry is dated inside a closed period
        """
        log = self._log(data.tenant_id)

        result = self._validator.validate(entry, data.chart)
        if not result.is_valid:
            log.warning(
                "journal_rejected",
                reason="validation",
                issues=[issue.issue_type for issue in result.errors],
            )
            raise ValidationError(self._validator.get_summary(result), result.errors)

        closed = find_closed_period(data, entry.date)
        if closed is not None:
            log.warning(
                "journal_rejected",
                reason="period_closed",
                period_id=str(closed.id),
                date=entry.date.isoformat(),
            )
            raise PeriodClosedError(entry.date, closed.name, str(closed.id))

        currency = entry.currency or data.settings.default_currency
        journal = JournalEntry(
            date=entry.date,
            description=entry.description,
            lines=[
                JournalLine(
                    account=line.account,
                    debit=line.debit,
                    credit=line.credit,
                    memo=line.memo,
                    tax_category=line.tax_category,
                    tags=list(line.tags),
                    entity_id=line.entity_id,
                )
                for line in entry.lines
            ],
            reference_id=entry.reference_id,
            posted_by=entry.posted_by,
            currency=currency,
        )

        ledger_entries = [
            LedgerEntry(
                date=journal.date,
                account=line.account,
                account_type=self._resolve_account_type(data, line.account),
                debit=line.debit,
                credit=line.credit,
                currency=currency,
                journal_id=journal.id,
                reference_id=journal.reference_id,
                tax_category=line.tax_category,
                tags=list(line.tags),
                memo=line.memo,
                entity_id=line.entity_id,
                description=journal.description,
            )
            for line in journal.lines
        ]

        # Newest first
        data.journals.insert(0, journal)
        data.ledgers[:0] = ledger_entries

        if result.warnings:
            log.info("journal_warnings", journal_id=str(journal.id), warnings=result.warnings)

        return PostingResult(journal=journal, ledger_entries=ledger_entries)

    def post_journal(self, tenant_id: str, entry: JournalEntryInput) -> PostingResult:
        """
        Post a journal entry for a tenant.

        Either the journal and all of its ledger rows are saved, or
        nothing is.
        """
        data = self._load(tenant_id)
        posting = self.apply_journal(data, entry)
        self._save(data)

        self._log(tenant_id).info(
            "journal_posted",
            journal_id=str(posting.journal.id),
            date=posting.journal.date.isoformat(),
            lines=len(posting.ledger_entries),
            amount=str(posting.journal.total_debit),
            reference_id=posting.journal.reference_id,
        )
        return posting

    def list_journals(self, tenant_id: str) -> list[JournalEntry]:
        return list(self._load(tenant_id).journals)

    def list_ledger_entries(
        self,
        tenant_id: str,
        account: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """Ledger rows, newest first, optionally filtered (inclusive dates)."""
        data = self._load(tenant_id)
        return filter_entries(
            data.ledgers,
            date_from=date_from,
            date_to=date_to,
            account=account,
        )

    def reset_ledger(self, tenant_id: str) -> None:
        """Clear all journals and ledger rows, e.g. before reloading demo data."""
        data = self._load(tenant_id)
        removed = len(data.journals)
        data.journals = []
        data.ledgers = []
        self._save(data)
        self._log(tenant_id).warning("ledger_reset", journals_removed=removed)
