"""
Journal & Ledger Models

A journal entry is one business event expressed as balanced debit/credit
lines. Posting it produces one ledger row per line.

DESIGN DECISION: Input models are deliberately permissive about amounts.
Negative or unbalanced lines must reach the journal validator so they are
reported as domain validation issues instead of being rejected by schema
parsing with a different error type.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from finance_core.models.accounts import AccountType
from finance_core.models.common import ZERO, Money, utc_now


class JournalLineInput(BaseModel):
    """A proposed journal line, not yet validated."""
    model_config = ConfigDict(str_strip_whitespace=True)

    account: str = Field(
        default="",
        description="Account code the line posts to"
    )
    debit: Money = ZERO
    credit: Money = ZERO
    memo: Optional[str] = None
    tax_category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    entity_id: Optional[str] = Field(
        default=None,
        description="Customer, supplier or other counterparty reference"
    )


class JournalEntryInput(BaseModel):
    """A proposed journal entry submitted for posting."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: date
    description: Optional[str] = None
    lines: list[JournalLineInput] = Field(default_factory=list)
    reference_id: Optional[str] = Field(
        default=None,
        description="Caller reference; stored but never checked for uniqueness"
    )
    posted_by: Optional[str] = None
    currency: Optional[str] = Field(
        default=None,
        description="Defaults to the tenant's currency"
    )


class JournalLine(BaseModel):
    """A validated line of a posted journal."""
    model_config = ConfigDict(frozen=True)

    account: str
    debit: Money = ZERO
    credit: Money = ZERO
    memo: Optional[str] = None
    tax_category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    entity_id: Optional[str] = None


class JournalEntry(BaseModel):
    """A posted journal. Never edited after posting."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    date: date
    description: Optional[str] = None
    lines: list[JournalLine]
    reference_id: Optional[str] = None
    posted_by: Optional[str] = None
    currency: str

    @property
    def total_debit(self) -> Money:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Money:
        return sum((line.credit for line in self.lines), ZERO)


class LedgerEntry(BaseModel):
    """
    One ledger row, projected from exactly one journal line.

    Ledger rows are immutable; the only way to add one is to post a journal.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: date
    account: str
    account_type: Optional[AccountType] = Field(
        default=None,
        description="Chart classification captured at posting time"
    )
    debit: Money = ZERO
    credit: Money = ZERO
    currency: str
    journal_id: UUID
    reference_id: Optional[str] = None
    tax_category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    memo: Optional[str] = None
    entity_id: Optional[str] = None
    description: Optional[str] = None

    @property
    def net(self) -> Money:
        """Debit-minus-credit movement of this row."""
        return self.debit - self.credit

    @property
    def resolved_type(self) -> Optional[AccountType]:
        """Typed classification, falling back to the code prefix."""
        return self.account_type or AccountType.from_code(self.account)


class PostingResult(BaseModel):
    """What a successful posting produced."""

    journal: JournalEntry
    ledger_entries: list[LedgerEntry]
