"""
Budget Service

Budgets set spending limits per category for a date range. After
creation only the recorded actuals change.
"""

from decimal import Decimal
from uuid import UUID

from finance_core.exceptions import NotFoundError
from finance_core.models.common import round_money, utc_now
from finance_core.models.reports import BudgetCategory, BudgetInput, BudgetPlan
from finance_core.services.base import TenantDatasetService


class BudgetService(TenantDatasetService):
    """Creates budgets and records actual spending against them."""

    def list_budgets(self, tenant_id: str) -> list[BudgetPlan]:
        return list(self._load(tenant_id).budgets)

    def create_budget(self, tenant_id: str, budget_input: BudgetInput) -> BudgetPlan:
        data = self._load(tenant_id)
        budget = BudgetPlan(
            name=budget_input.name,
            currency=budget_input.currency or data.settings.default_currency,
            period_start=budget_input.period_start,
            period_end=budget_input.period_end,
            categories=[
                BudgetCategory(name=category.name, limit=category.limit)
                for category in budget_input.categories
            ],
        )
        data.budgets.insert(0, budget)
        self._save(data)

        self._log(tenant_id).info(
            "budget_created",
            budget_id=str(budget.id),
            categories=len(budget.categories),
            total_limit=str(budget.total_limit),
        )
        return budget

    def update_actuals(
        self,
        tenant_id: str,
        budget_id: UUID,
        actuals: dict[str, Decimal],
    ) -> BudgetPlan:
        """
        Replace the actual spend of the named categories.

        Category names that are not in the budget are skipped.

        Raises:
            NotFoundError: If the budget does not exist
        """
        data = self._load(tenant_id)
        budget = next((b for b in data.budgets if b.id == budget_id), None)
        if budget is None:
            raise NotFoundError("Budget", str(budget_id))

        log = self._log(tenant_id)
        by_name = {category.name: category for category in budget.categories}
        for name, amount in actuals.items():
            category = by_name.get(name)
            if category is None:
                log.warning("budget_category_unknown", budget_id=str(budget_id), category=name)
                continue
            category.actual = round_money(amount)

        budget.updated_at = utc_now()
        self._save(data)

        log.info(
            "budget_actuals_updated",
            budget_id=str(budget.id),
            total_actual=str(budget.total_actual),
            over_budget=[c.name for c in budget.categories if c.is_over_budget],
        )
        return budget
