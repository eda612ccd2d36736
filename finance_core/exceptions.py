"""
Finance Core Errors

Every error is scoped to the single operation that raised it. Nothing is
retried here and nothing is written before an error is raised.
"""

from datetime import date
from decimal import Decimal
from typing import Optional


class FinanceError(Exception):
    """Base exception for all finance core failures."""


class ValidationError(FinanceError):
    """
    Malformed input caught before any mutation.

    Carries the individual issues so callers can show all of them at once.
    """

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = issues or []


class PeriodClosedError(FinanceError):
    """A posting was dated inside a closed accounting period."""

    def __init__(self, posting_date: date, period_name: str, period_id: Optional[str] = None):
        super().__init__(
            f"Cannot post on {posting_date.isoformat()}: period '{period_name}' is closed. "
            "Reopen the period or choose a different date."
        )
        self.posting_date = posting_date
        self.period_name = period_name
        self.period_id = period_id


class InsufficientStockError(FinanceError):
    """An outbound movement cannot be covered by stock on hand."""

    def __init__(self, sku: str, requested: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient stock for {sku}: requested {requested}, available {available}"
        )
        self.sku = sku
        self.requested = requested
        self.available = available


class NotFoundError(FinanceError):
    """Referenced account, period, budget, item or profile does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier
