"""
Chart of Accounts Service

Accounts are keyed by code. Seeding installs a template into an empty
chart only: once a tenant has any account, seeding is a no-op and never
merges.
"""

from typing import Optional

from finance_core.config import get_settings
from finance_core.exceptions import NotFoundError, ValidationError
from finance_core.models.accounts import Account, AccountInput, AccountType
from finance_core.services.base import TenantDatasetService

A = AccountType

_CORE_ACCOUNTS = [
    ("Asset:Cash:Operating", "Operating Cash", A.ASSET, None),
    ("Asset:Bank:Operating", "Operating Bank Account", A.ASSET, None),
    ("Asset:AccountsReceivable", "Accounts Receivable", A.ASSET, None),
    ("Liability:AccountsPayable", "Accounts Payable", A.LIABILITY, None),
    ("Liability:GSTPayable", "GST Payable", A.LIABILITY, None),
    ("Equity:OwnerCapital", "Owner Capital", A.EQUITY, None),
    ("Equity:RetainedEarnings", "Retained Earnings", A.EQUITY, None),
]

# (code, name, type, parent_code)
CHART_TEMPLATES: dict[str, list[tuple]] = {
    "DEFAULT": _CORE_ACCOUNTS + [
        ("Income:Sales", "Sales", A.INCOME, None),
        ("Income:Other", "Other Income", A.INCOME, None),
        ("Expense:Operating", "Operating Expenses", A.EXPENSE, None),
        ("Expense:Rent", "Rent", A.EXPENSE, "Expense:Operating"),
        ("Expense:Wages", "Wages", A.EXPENSE, "Expense:Operating"),
    ],
    "RETAIL": _CORE_ACCOUNTS + [
        ("Asset:Inventory", "Inventory", A.ASSET, None),
        ("Income:Sales", "Sales", A.INCOME, None),
        ("Income:Sales:Online", "Online Sales", A.INCOME, "Income:Sales"),
        ("Expense:COGS", "Cost of Goods Sold", A.EXPENSE, None),
        ("Expense:Operating", "Operating Expenses", A.EXPENSE, None),
        ("Expense:Rent", "Rent", A.EXPENSE, "Expense:Operating"),
        ("Expense:Freight", "Freight", A.EXPENSE, "Expense:Operating"),
    ],
    "SERVICES": _CORE_ACCOUNTS + [
        ("Asset:WorkInProgress", "Work in Progress", A.ASSET, None),
        ("Liability:UnearnedRevenue", "Unearned Revenue", A.LIABILITY, None),
        ("Income:Services", "Service Revenue", A.INCOME, None),
        ("Income:Consulting", "Consulting", A.INCOME, "Income:Services"),
        ("Expense:Operating", "Operating Expenses", A.EXPENSE, None),
        ("Expense:Subcontractors", "Subcontractors", A.EXPENSE, "Expense:Operating"),
        ("Expense:Software", "Software Subscriptions", A.EXPENSE, "Expense:Operating"),
    ],
}


class ChartOfAccountsService(TenantDatasetService):
    """Seeds, lists and upserts chart accounts."""

    def list_accounts(self, tenant_id: str) -> list[Account]:
        return list(self._load(tenant_id).chart)

    def get_account(self, tenant_id: str, code: str) -> Account:
        account = self._load(tenant_id).find_account(code)
        if account is None:
            raise NotFoundError("Account", code)
        return account

    def seed_template(self, tenant_id: str, template_name: Optional[str] = None) -> list[Account]:
        """
        Install a chart template if the chart is empty.

        With no template named, FINANCE_DEFAULT_CHART_TEMPLATE is used.

        Returns the tenant's chart, seeded or not.

        Raises:
            ValidationError: If the template does not exist
        """
        template_name = template_name or get_settings().finance.default_chart_template
        name = template_name.strip().upper()
        template = CHART_TEMPLATES.get(name)
        if template is None:
            raise ValidationError(
                f"Unknown chart template '{template_name}'. "
                f"Available: {', '.join(sorted(CHART_TEMPLATES))}"
            )

        data = self._load(tenant_id)
        if data.chart:
            self._log(tenant_id).debug("chart_seed_skipped", accounts=len(data.chart))
            return list(data.chart)

        data.chart = [
            Account(code=code, name=label, type=account_type, parent_code=parent)
            for code, label, account_type, parent in template
        ]
        self._save(data)

        self._log(tenant_id).info("chart_seeded", template=name, accounts=len(data.chart))
        return list(data.chart)

    def upsert_account(self, tenant_id: str, account_input: AccountInput) -> Account:
        """Update the account with the same code, or add a new one at the head."""
        data = self._load(tenant_id)
        account = data.find_account(account_input.code)

        if account is not None:
            account.name = account_input.name
            account.type = account_input.type
            account.parent_code = account_input.parent_code
            account.currency = account_input.currency
            account.tags = list(account_input.tags)
            action = "updated"
        else:
            account = Account(**account_input.model_dump())
            data.chart.insert(0, account)
            action = "created"

        self._save(data)
        self._log(tenant_id).info("account_upserted", code=account.code, action=action)
        return account
