"""
Reporting Service

Generates statements from a tenant's ledger and keeps each one as a
frozen snapshot. Snapshots are only ever appended.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from finance_core.models.common import ZERO
from finance_core.models.reports import (
    CashflowLine,
    CashflowSnapshot,
    FinancialReportSnapshot,
    ReportType,
)
from finance_core.services.base import TenantDatasetService
from finance_core.services.statements import (
    build_balance_sheet,
    build_cashflow,
    build_profit_and_loss,
    calculate_trial_balance,
    filter_entries,
)

_BUILDERS = {
    ReportType.PROFIT_AND_LOSS: build_profit_and_loss,
    ReportType.BALANCE_SHEET: build_balance_sheet,
    ReportType.CASHFLOW: build_cashflow,
    ReportType.TRIAL_BALANCE: calculate_trial_balance,
}


def _bucket_total(lines: list[CashflowLine]) -> Decimal:
    return sum((line.net for line in lines), ZERO)


class ReportingService(TenantDatasetService):
    """Builds and stores financial report snapshots."""

    def generate_report(
        self,
        tenant_id: str,
        report_type: ReportType,
        currency: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> FinancialReportSnapshot:
        """
        Build a statement over ``[date_from, date_to]`` and store a snapshot.

        A cashflow report also stores a ``CashflowSnapshot`` of its totals.
        """
        report_type = ReportType(report_type)
        data = self._load(tenant_id)
        currency = currency or data.settings.default_currency

        entries = filter_entries(data.ledgers, date_from=date_from, date_to=date_to)
        statement = _BUILDERS[report_type](entries)

        snapshot = FinancialReportSnapshot(
            report_type=report_type,
            currency=currency,
            date_from=date_from,
            date_to=date_to,
            payload=statement.model_dump(mode="json"),
        )
        data.reports.append(snapshot)

        if report_type == ReportType.CASHFLOW:
            data.cashflows.append(CashflowSnapshot(
                generated_at=snapshot.generated_at,
                currency=currency,
                operating=_bucket_total(statement.operating),
                investing=_bucket_total(statement.investing),
                financing=_bucket_total(statement.financing),
                net_change=statement.net_change,
            ))

        self._save(data)

        self._log(tenant_id).info(
            "report_generated",
            report_id=str(snapshot.id),
            report_type=report_type.value,
            rows=len(entries),
        )
        return snapshot

    def list_reports(
        self,
        tenant_id: str,
        report_type: Optional[ReportType] = None,
    ) -> list[FinancialReportSnapshot]:
        reports = self._load(tenant_id).reports
        if report_type is None:
            return list(reports)
        return [report for report in reports if report.report_type == report_type]

    def list_cashflows(self, tenant_id: str) -> list[CashflowSnapshot]:
        return list(self._load(tenant_id).cashflows)
