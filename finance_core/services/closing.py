"""
Closing Engine

Transfers a window's income and expense balances into equity.

ALGORITHM:
1. Net every Income: and Expense: account over the window
2. Income accounts carrying a credit balance get a debit that zeroes them
3. Expense accounts carrying a debit balance get a credit that zeroes them
4. One balancing line goes to the equity account, credit for a profit,
   debit for a loss, omitted when net income is exactly zero

The closing journal is posted through the ordinary posting path, so it is
refused like any other journal when dated inside a closed period. A
period is therefore closed only after its closing entry has posted.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from finance_core.config import get_settings
from finance_core.exceptions import PeriodClosedError
from finance_core.models.accounts import AccountType
from finance_core.models.common import ZERO, Money
from finance_core.models.journal import (
    JournalEntry,
    JournalEntryInput,
    JournalLineInput,
    LedgerEntry,
)
from finance_core.models.periods import Period
from finance_core.models.tenant import TenantFinanceData
from finance_core.services.base import TenantDatasetService
from finance_core.services.journal import JournalService
from finance_core.services.periods import get_period, mark_period_closed
from finance_core.services.statements import filter_entries, net_by_account
from finance_core.services.storage import FinanceStoreInterface


class ClosingRequest(BaseModel):
    """What to close and where the result goes."""

    date: date
    entries: Optional[list[LedgerEntry]] = Field(
        default=None,
        description="Ledger rows to close; the tenant's ledger when omitted"
    )
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    equity_account: Optional[str] = Field(
        default=None,
        description="Defaults to the configured retained earnings account"
    )
    description: Optional[str] = None

    @model_validator(mode='after')
    def validate_window(self) -> 'ClosingRequest':
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("Closing window ends before it starts")
        return self


class ClosingResult(BaseModel):
    journal_id: UUID
    net_income: Money
    journal: JournalEntry
    period: Optional[Period] = None


def build_closing_lines(
    entries: list[LedgerEntry],
    equity_account: str,
) -> tuple[list[JournalLineInput], Decimal]:
    """
    Lines that zero the P&L accounts in ``entries`` into ``equity_account``.

    Returns: (lines, net_income)
    """
    lines = []
    net_income = ZERO

    for account, net in sorted(net_by_account(entries, AccountType.INCOME).items()):
        balance = -net
        if balance > 0:
            lines.append(JournalLineInput(account=account, debit=balance, memo="Close income"))
            net_income += balance

    for account, net in sorted(net_by_account(entries, AccountType.EXPENSE).items()):
        if net > 0:
            lines.append(JournalLineInput(account=account, credit=net, memo="Close expense"))
            net_income -= net

    if net_income > 0:
        lines.append(JournalLineInput(account=equity_account, credit=net_income, memo="Net income"))
    elif net_income < 0:
        lines.append(JournalLineInput(account=equity_account, debit=-net_income, memo="Net loss"))

    return lines, net_income


class ClosingService(TenantDatasetService):
    """Posts closing entries and closes periods behind them."""

    def __init__(
        self,
        store: FinanceStoreInterface,
        journal_service: Optional[JournalService] = None,
    ):
        super().__init__(store)
        self._journals = journal_service or JournalService(store)

    def _apply_closing(
        self,
        data: TenantFinanceData,
        request: ClosingRequest,
    ) -> ClosingResult:
        source = request.entries if request.entries is not None else data.ledgers
        window = filter_entries(source, date_from=request.date_from, date_to=request.date_to)
        equity_account = (
            request.equity_account
            or get_settings().finance.retained_earnings_account
        )

        lines, net_income = build_closing_lines(window, equity_account)

        # An empty line set is rejected by the journal validator
        posting = self._journals.apply_journal(data, JournalEntryInput(
            date=request.date,
            description=request.description or "Closing entry",
            lines=lines,
        ))
        return ClosingResult(
            journal_id=posting.journal.id,
            net_income=net_income,
            journal=posting.journal,
        )

    def create_closing_entry(self, tenant_id: str, request: ClosingRequest) -> ClosingResult:
        """
        Post a closing entry for the request's window.

        Raises:
            ValidationError: If there is nothing to close
            PeriodClosedError: If ``request.date`` falls in a closed period
        """
        data = self._load(tenant_id)
        result = self._apply_closing(data, request)
        self._save(data)

        self._log(tenant_id).info(
            "closing_entry_posted",
            journal_id=str(result.journal_id),
            net_income=str(result.net_income),
        )
        return result

    def close_period_with_entry(
        self,
        tenant_id: str,
        period_id: UUID,
        equity_account: Optional[str] = None,
    ) -> ClosingResult:
        """
        Post the period's closing entry, then close the period.

        Both changes land in one save; if the closing entry fails the
        period stays open.
        """
        data = self._load(tenant_id)
        period = get_period(data, period_id)
        if period.is_closed:
            raise PeriodClosedError(period.end_date, period.name, str(period.id))

        result = self._apply_closing(data, ClosingRequest(
            date=period.end_date,
            date_from=period.start_date,
            date_to=period.end_date,
            equity_account=equity_account,
            description=f"Closing entry for {period.name}",
        ))
        mark_period_closed(period)
        self._save(data)

        self._log(tenant_id).info(
            "period_closed",
            period_id=str(period.id),
            journal_id=str(result.journal_id),
            net_income=str(result.net_income),
        )
        return result.model_copy(update={"period": period})
