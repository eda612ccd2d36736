"""
Chart of Accounts Models

Account codes are colon-delimited paths such as ``Asset:Bank:Operating``.
The first segment is load-bearing: statements and closing entries classify
rows by it. ``AccountType`` stores that classification as a typed field
alongside the code, while the code format itself stays unchanged.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from finance_core.models.common import utc_now


class AccountType(str, Enum):
    """The five account classes of double-entry bookkeeping."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def code_prefix(self) -> str:
        """Literal first segment used in account codes (e.g. ``Asset:``)."""
        return f"{self.value.capitalize()}:"

    @property
    def is_credit_normal(self) -> bool:
        """Liabilities, equity and income increase with credits."""
        return self in (AccountType.LIABILITY, AccountType.EQUITY, AccountType.INCOME)

    @classmethod
    def from_code(cls, code: str) -> Optional["AccountType"]:
        """
        Classify an account code by its literal, case-sensitive prefix.

        ``"Income:Sales"`` is INCOME; ``"income:Sales"`` and ``"Income"``
        are unclassified.
        """
        for account_type in cls:
            if code.startswith(account_type.code_prefix):
                return account_type
        return None


class AccountInput(BaseModel):
    """Payload for creating or updating a chart account."""
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(
        ...,
        min_length=1,
        description="Unique hierarchical account code"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    type: AccountType
    parent_code: Optional[str] = Field(
        default=None,
        description="Code of the parent account (not checked for existence)"
    )
    currency: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class Account(BaseModel):
    """An account registered in a tenant's chart."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: AccountType
    parent_code: Optional[str] = None
    currency: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
