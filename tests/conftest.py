"""Shared fixtures: an in-memory store and a finance core wired to it."""

from datetime import date
from decimal import Decimal

import pytest

from finance_core.models import JournalEntryInput, JournalLineInput
from finance_core.orchestrator import FinanceCore
from finance_core.services.storage import InMemoryFinanceStore


@pytest.fixture
def store():
    return InMemoryFinanceStore()


@pytest.fixture
def core(store):
    return FinanceCore(store)


@pytest.fixture
def tenant_id():
    return "tenant-a"


def make_journal(on: date, *lines: tuple, description: str = "Test journal") -> JournalEntryInput:
    """Build a journal from (account, debit, credit) tuples."""
    return JournalEntryInput(
        date=on,
        description=description,
        lines=[
            JournalLineInput(account=account, debit=Decimal(str(debit)), credit=Decimal(str(credit)))
            for account, debit, credit in lines
        ],
    )
