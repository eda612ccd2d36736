"""
Financial Statement Builder

Pure functions over ledger rows: nothing here loads or saves a dataset.

Sign convention: a row's ``net`` is debit minus credit. Debit-normal
classes (assets, expenses) are presented at raw net; credit-normal
classes (liabilities, equity, income) are negated so that normal
balances read as positive amounts.

Classification uses the row's typed ``account_type`` and falls back to
the literal, case-sensitive account code prefix.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_core.models.accounts import AccountType
from finance_core.models.common import ZERO, round_money
from finance_core.models.journal import LedgerEntry
from finance_core.models.reports import (
    BalanceSheet,
    Cashflow,
    CashflowLine,
    ProfitAndLoss,
    StatementLine,
    TrialBalance,
    TrialBalanceRow,
)

CASH_TAG = "cash"
CASH_PREFIX = "Cash:"


def filter_entries(
    entries: Iterable[LedgerEntry],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    account: Optional[str] = None,
) -> list[LedgerEntry]:
    """Keep rows inside ``[date_from, date_to]`` (open-ended when omitted)."""
    result = []
    for entry in entries:
        if date_from is not None and entry.date < date_from:
            continue
        if date_to is not None and entry.date > date_to:
            continue
        if account is not None and entry.account != account:
            continue
        result.append(entry)
    return result


def net_by_account(
    entries: Iterable[LedgerEntry],
    account_type: Optional[AccountType] = None,
) -> dict[str, Decimal]:
    """Sum debit minus credit per account, optionally for one class only."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        if account_type is not None and entry.resolved_type != account_type:
            continue
        totals[entry.account] += entry.net
    return dict(totals)


def _statement_lines(entries: list[LedgerEntry], account_type: AccountType) -> list[StatementLine]:
    """One line per account of a class, credit-normal classes shown positive."""
    negate = account_type.is_credit_normal
    totals = net_by_account(entries, account_type)
    return [
        StatementLine(account=account, amount=-amount if negate else amount)
        for account, amount in sorted(totals.items())
    ]


def _total(lines: list[StatementLine]) -> Decimal:
    return round_money(sum((line.amount for line in lines), ZERO))


def calculate_trial_balance(entries: Iterable[LedgerEntry]) -> TrialBalance:
    """
    Debit and credit totals per account.

    Over a ledger's full history the nets sum to zero, because every
    posted journal balanced.
    """
    debits: dict[str, Decimal] = defaultdict(lambda: ZERO)
    credits: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        debits[entry.account] += entry.debit
        credits[entry.account] += entry.credit

    rows = [
        TrialBalanceRow(
            account=account,
            debit=debits[account],
            credit=credits[account],
            net=debits[account] - credits[account],
        )
        for account in sorted(debits)
    ]
    return TrialBalance(
        rows=rows,
        total_debit=sum((row.debit for row in rows), ZERO),
        total_credit=sum((row.credit for row in rows), ZERO),
    )


def build_profit_and_loss(entries: Iterable[LedgerEntry]) -> ProfitAndLoss:
    entries = list(entries)
    income = _statement_lines(entries, AccountType.INCOME)
    expenses = _statement_lines(entries, AccountType.EXPENSE)

    total_income = _total(income)
    total_expenses = _total(expenses)
    return ProfitAndLoss(
        income=income,
        expenses=expenses,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
    )


def build_balance_sheet(entries: Iterable[LedgerEntry]) -> BalanceSheet:
    """
    Assets, liabilities and equity as at the last row supplied.

    Income and expense activity that has not been closed into equity is
    reported separately as ``current_earnings`` so the sheet still balances
    between closes.
    """
    entries = list(entries)
    assets = _statement_lines(entries, AccountType.ASSET)
    liabilities = _statement_lines(entries, AccountType.LIABILITY)
    equity = _statement_lines(entries, AccountType.EQUITY)

    return BalanceSheet(
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        total_assets=_total(assets),
        total_liabilities=_total(liabilities),
        total_equity=_total(equity),
        current_earnings=build_profit_and_loss(entries).net_profit,
    )


def is_cash_entry(entry: LedgerEntry) -> bool:
    return CASH_TAG in entry.tags or entry.account.startswith(CASH_PREFIX)


def build_cashflow(entries: Iterable[LedgerEntry]) -> Cashflow:
    """
    Cash movements grouped by account.

    Every cash row is treated as operating activity; investing and
    financing are always empty.
    """
    inflows: dict[str, Decimal] = defaultdict(lambda: ZERO)
    outflows: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        if not is_cash_entry(entry):
            continue
        inflows[entry.account] += entry.debit
        outflows[entry.account] += entry.credit

    operating = [
        CashflowLine(
            account=account,
            inflow=inflows[account],
            outflow=outflows[account],
            net=inflows[account] - outflows[account],
        )
        for account in sorted(inflows)
    ]
    return Cashflow(
        operating=operating,
        net_change=sum((line.net for line in operating), ZERO),
    )
