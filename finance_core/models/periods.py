"""Accounting period models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finance_core.models.common import utc_now


class PeriodStatus(str, Enum):
    """
    Period lifecycle.

    CRITICAL: no journal dated inside a CLOSED period may be posted.
    """
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class PeriodInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    start_date: date
    end_date: date


class Period(BaseModel):
    """A bounded, inclusive date range that can be closed to postings."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    name: str
    start_date: date
    end_date: date
    status: PeriodStatus = PeriodStatus.OPEN
    closed_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_dates(self) -> 'Period':
        if self.end_date < self.start_date:
            raise ValueError("Period end cannot be before start")
        return self

    @property
    def is_closed(self) -> bool:
        return self.status == PeriodStatus.CLOSED

    def contains(self, on_date: date) -> bool:
        """Inclusive containment check."""
        return self.start_date <= on_date <= self.end_date
