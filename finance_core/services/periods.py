"""
Period Registry

Periods are inclusive date ranges. A CLOSED period blocks every posting
dated inside it; that check lives in ``find_closed_period`` and is called
by the journal service before anything is written.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from finance_core.exceptions import NotFoundError, ValidationError
from finance_core.models.common import utc_now
from finance_core.models.periods import Period, PeriodInput, PeriodStatus
from finance_core.models.tenant import TenantFinanceData
from finance_core.services.base import TenantDatasetService


def find_closed_period(data: TenantFinanceData, on_date: date) -> Optional[Period]:
    """Return the closed period containing ``on_date``, if any."""
    for period in data.periods:
        if period.is_closed and period.contains(on_date):
            return period
    return None


def get_period(data: TenantFinanceData, period_id: UUID) -> Period:
    for period in data.periods:
        if period.id == period_id:
            return period
    raise NotFoundError("Period", str(period_id))


def mark_period_closed(period: Period) -> bool:
    """Close a period in place. Returns False if it was already closed."""
    if period.is_closed:
        return False
    period.status = PeriodStatus.CLOSED
    period.closed_at = utc_now()
    return True


class PeriodService(TenantDatasetService):
    """Creates, closes and reopens accounting periods."""

    def list_periods(self, tenant_id: str) -> list[Period]:
        data = self._load(tenant_id)
        return sorted(data.periods, key=lambda p: p.start_date)

    def create_period(self, tenant_id: str, period_input: PeriodInput) -> Period:
        if period_input.end_date < period_input.start_date:
            raise ValidationError(
                f"Period '{period_input.name}' ends before it starts "
                f"({period_input.end_date} < {period_input.start_date})"
            )

        data = self._load(tenant_id)
        period = Period(
            name=period_input.name,
            start_date=period_input.start_date,
            end_date=period_input.end_date,
        )
        data.periods.insert(0, period)
        self._save(data)

        self._log(tenant_id).info(
            "period_created",
            period_id=str(period.id),
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
        )
        return period

    def close_period(self, tenant_id: str, period_id: UUID) -> Period:
        """
        Mark a period CLOSED.

        Post any closing entry first: once closed, nothing dated inside the
        period can be posted, including the closing entry itself.
        """
        data = self._load(tenant_id)
        period = get_period(data, period_id)

        if not mark_period_closed(period):
            return period

        self._save(data)
        self._log(tenant_id).info("period_closed", period_id=str(period.id))
        return period

    def reopen_period(self, tenant_id: str, period_id: UUID) -> Period:
        data = self._load(tenant_id)
        period = get_period(data, period_id)

        if not period.is_closed:
            return period

        period.status = PeriodStatus.OPEN
        period.closed_at = None
        self._save(data)

        self._log(tenant_id).warning("period_reopened", period_id=str(period.id))
        return period
