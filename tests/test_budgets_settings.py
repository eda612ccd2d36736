"""Tests for tenant settings, budgets and periods."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from finance_core.exceptions import NotFoundError, ValidationError
from finance_core.models import (
    BudgetCategoryInput,
    BudgetInput,
    PeriodInput,
    PeriodStatus,
    TenantSettingsUpdate,
    ValuationMethod,
)


class TestSettings:
    """Tests for tenant settings."""

    def test_defaults_for_new_tenant(self, core, tenant_id):
        """Test that a new tenant starts on FIFO and AUD."""
        settings = core.settings.get_settings(tenant_id)
        assert settings.valuation_method == ValuationMethod.FIFO
        assert settings.default_currency == "AUD"

    def test_partial_update(self, core, tenant_id):
        """Test that only supplied fields change."""
        core.settings.update_settings(tenant_id, TenantSettingsUpdate(default_currency="nzd"))
        settings = core.settings.update_settings(
            tenant_id,
            TenantSettingsUpdate(valuation_method=ValuationMethod.AVG),
        )
        assert settings.default_currency == "NZD"
        assert settings.valuation_method == ValuationMethod.AVG


class TestBudgets:
    """Tests for budgets and actuals."""

    @pytest.fixture
    def budget(self, core, tenant_id):
        return core.budgets.create_budget(tenant_id, BudgetInput(
            name="Q1 2024",
            period_start=date(2024, 1, 1),
            period_end=date(2024, 3, 31),
            categories=[
                BudgetCategoryInput(name="Rent", limit=Decimal("3000")),
                BudgetCategoryInput(name="Marketing", limit=Decimal("500")),
            ],
        ))

    def test_create_budget(self, budget):
        """Test that a budget starts with zero actuals."""
        assert budget.currency == "AUD"
        assert budget.total_limit == Decimal("3500.00")
        assert budget.total_actual == Decimal("0.00")

    def test_update_actuals(self, core, tenant_id, budget):
        """Test that actuals are recorded and unknown categories skipped."""
        updated = core.budgets.update_actuals(tenant_id, budget.id, {
            "Marketing": Decimal("620.456"),
            "Travel": Decimal("90"),
        })

        marketing = next(c for c in updated.categories if c.name == "Marketing")
        assert marketing.actual == Decimal("620.46")
        assert marketing.is_over_budget
        assert {c.name for c in updated.categories} == {"Rent", "Marketing"}

    def test_update_unknown_budget(self, core, tenant_id):
        """Test that an unknown budget raises NotFoundError."""
        with pytest.raises(NotFoundError):
            core.budgets.update_actuals(tenant_id, uuid4(), {"Rent": Decimal("1")})

    def test_budget_period_validation(self):
        """Test that a budget cannot end before it starts."""
        with pytest.raises(ValueError, match="Budget period end cannot be before start"):
            BudgetInput(
                name="Backwards",
                period_start=date(2024, 3, 1),
                period_end=date(2024, 1, 1),
                categories=[BudgetCategoryInput(name="Rent", limit=Decimal("1"))],
            )


class TestPeriods:
    """Tests for the period registry."""

    def test_create_and_list_sorted(self, core, tenant_id):
        """Test that periods are listed by start date."""
        core.periods.create_period(tenant_id, PeriodInput(
            name="Feb", start_date=date(2024, 2, 1), end_date=date(2024, 2, 29),
        ))
        core.periods.create_period(tenant_id, PeriodInput(
            name="Jan", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
        ))
        assert [p.name for p in core.periods.list_periods(tenant_id)] == ["Jan", "Feb"]

    def test_end_before_start_rejected(self, core, tenant_id):
        """Test that a backwards period raises ValidationError."""
        with pytest.raises(ValidationError):
            core.periods.create_period(tenant_id, PeriodInput(
                name="Bad", start_date=date(2024, 2, 1), end_date=date(2024, 1, 1),
            ))

    def test_close_twice_is_noop(self, core, store, tenant_id):
        """Test that closing a closed period does not save again."""
        period = core.periods.create_period(tenant_id, PeriodInput(
            name="Jan", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
        ))
        closed = core.periods.close_period(tenant_id, period.id)
        version = store.load_tenant_finance(tenant_id).version

        again = core.periods.close_period(tenant_id, period.id)

        assert closed.status == again.status == PeriodStatus.CLOSED
        assert again.closed_at == closed.closed_at
        assert store.load_tenant_finance(tenant_id).version == version

    def test_close_unknown_period(self, core, tenant_id):
        """Test that an unknown period raises NotFoundError."""
        with pytest.raises(NotFoundError):
            core.periods.close_period(tenant_id, uuid4())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
