"""Tests for the inventory costing engine."""

from datetime import date
from decimal import Decimal

import pytest

from finance_core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from finance_core.models import (
    InventoryItemInput,
    InventoryTransactionInput,
    InventoryTransactionType,
    TenantSettingsUpdate,
    ValuationMethod,
)

SKU = "WIDGET-1"


def movement(tx_type, quantity, unit_cost=None, on=date(2024, 1, 1)):
    return InventoryTransactionInput(
        sku=SKU,
        type=tx_type,
        quantity=Decimal(str(quantity)),
        unit_cost=Decimal(str(unit_cost)) if unit_cost is not None else None,
        date=on,
    )


@pytest.fixture
def widget(core, tenant_id):
    return core.inventory.upsert_item(tenant_id, InventoryItemInput(
        sku=SKU,
        name="Widget",
        uom="each",
    ))


def use_method(core, tenant_id, method):
    core.settings.update_settings(tenant_id, TenantSettingsUpdate(valuation_method=method))


def receive_two_lots(core, tenant_id):
    """IN 10@5 then IN 10@8 on consecutive days."""
    core.inventory.apply_transaction(
        tenant_id, movement(InventoryTransactionType.IN, 10, 5, on=date(2024, 1, 1)),
    )
    core.inventory.apply_transaction(
        tenant_id, movement(InventoryTransactionType.IN, 10, 8, on=date(2024, 1, 2)),
    )


class TestItems:
    """Tests for item upserts."""

    def test_new_item_uses_tenant_currency(self, widget):
        """Test that new items default to the tenant currency."""
        assert widget.currency == "AUD"
        assert widget.quantity_on_hand == Decimal("0")

    def test_upsert_matches_by_sku(self, core, tenant_id, widget):
        """Test that upserting the same SKU updates it."""
        updated = core.inventory.upsert_item(tenant_id, InventoryItemInput(
            sku=SKU,
            name="Blue Widget",
            uom="box",
        ))
        assert updated.id == widget.id
        assert len(core.inventory.list_items(tenant_id)) == 1


class TestInbound:
    """Tests for IN movements."""

    def test_moving_average(self, core, tenant_id, widget):
        """Test the weighted average after two receipts."""
        receive_two_lots(core, tenant_id)
        item = core.inventory.list_items(tenant_id)[0]

        assert item.quantity_on_hand == Decimal("20")
        assert item.average_cost == Decimal("6.50")

    def test_zero_unit_cost_rejected(self, core, tenant_id, widget):
        """Test that receipts need a positive unit cost."""
        with pytest.raises(ValidationError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.IN, 5, 0))

    def test_missing_unit_cost_rejected(self, core, tenant_id, widget):
        """Test that receipts need a unit cost."""
        with pytest.raises(ValidationError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.IN, 5))

    def test_unknown_sku(self, core, tenant_id):
        """Test that movements need an existing item."""
        with pytest.raises(NotFoundError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.IN, 5, 1))


class TestOutbound:
    """Tests for OUT movements under each valuation method."""

    def test_fifo_consumes_oldest_first(self, core, tenant_id, widget):
        """Test that FIFO takes 10@5 and 5@8, leaving 5@8."""
        receive_two_lots(core, tenant_id)

        result = core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 15))

        assert [(c.quantity, c.unit_cost) for c in result.consumed_lots] == [
            (Decimal("10"), Decimal("5.00")),
            (Decimal("5"), Decimal("8.00")),
        ]
        assert result.cost_of_goods == Decimal("90.00")
        lots = core.inventory.list_lots(tenant_id, SKU)
        assert [(lot.quantity, lot.unit_cost) for lot in lots] == [(Decimal("5"), Decimal("8.00"))]

    def test_lifo_consumes_newest_first(self, core, tenant_id, widget):
        """Test that LIFO takes 10@8 and 5@5, leaving 5@5."""
        use_method(core, tenant_id, ValuationMethod.LIFO)
        receive_two_lots(core, tenant_id)

        result = core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 15))

        assert result.cost_of_goods == Decimal("105.00")
        lots = core.inventory.list_lots(tenant_id, SKU)
        assert [(lot.quantity, lot.unit_cost) for lot in lots] == [(Decimal("5"), Decimal("5.00"))]

    def test_avg_skips_lot_walk(self, core, tenant_id, widget):
        """Test that AVG costs at the average and leaves lots alone."""
        use_method(core, tenant_id, ValuationMethod.AVG)
        receive_two_lots(core, tenant_id)

        result = core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 4))

        assert result.consumed_lots == []
        assert result.cost_of_goods == Decimal("26.00")
        assert result.item.quantity_on_hand == Decimal("16")
        assert sum(lot.quantity for lot in core.inventory.list_lots(tenant_id, SKU)) == Decimal("20")

    def test_insufficient_stock_rolls_back(self, core, store, tenant_id, widget):
        """Test that an oversized OUT changes nothing."""
        receive_two_lots(core, tenant_id)
        before = store.load_tenant_finance(tenant_id)

        with pytest.raises(InsufficientStockError) as exc_info:
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 21))

        after = store.load_tenant_finance(tenant_id)
        assert exc_info.value.available == Decimal("20")
        assert after.version == before.version
        assert after.inventory_items[0].quantity_on_hand == Decimal("20")
        assert len(after.inventory_transactions) == 2

    def test_lot_shortfall_rolls_back(self, core, store, tenant_id, widget):
        """Test that lots unable to cover the OUT abort the movement."""
        receive_two_lots(core, tenant_id)

        # Leave on-hand at 20 but only one lot of 10 to walk
        data = store.load_tenant_finance(tenant_id)
        data.inventory_lots = data.inventory_lots[:1]
        store.save_tenant_finance(tenant_id, data)

        with pytest.raises(InsufficientStockError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 15))

        assert core.inventory.list_items(tenant_id)[0].quantity_on_hand == Decimal("20")

        lots = core.inventory.list_lots(tenant_id, SKU)
        assert lots[0].quantity == Decimal("10")

    def test_non_positive_quantity_rejected(self, core, tenant_id, widget):
        """Test that OUT quantities must be positive."""
        with pytest.raises(ValidationError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 0))


class TestAdjustments:
    """Tests for stock-take adjustments."""

    def test_positive_adjustment_keeps_average(self, core, tenant_id, widget):
        """Test that found stock does not move the average cost."""
        receive_two_lots(core, tenant_id)
        result = core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.ADJUST, 2))

        assert result.item.quantity_on_hand == Decimal("22")
        assert result.item.average_cost == Decimal("6.50")
        assert result.cost_of_goods == Decimal("0.00")

    def test_negative_adjustment_below_zero_rejected(self, core, tenant_id, widget):
        """Test that adjustments cannot take stock negative."""
        with pytest.raises(InsufficientStockError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.ADJUST, -1))

    def test_zero_adjustment_rejected(self, core, tenant_id, widget):
        """Test that a zero adjustment is rejected."""
        with pytest.raises(ValidationError):
            core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.ADJUST, 0))


class TestConservation:
    """Tests that lots and on-hand quantity stay in step."""

    @pytest.mark.parametrize("method", [ValuationMethod.FIFO, ValuationMethod.LIFO])
    def test_lots_sum_to_on_hand(self, core, tenant_id, widget, method):
        """Test quantity conservation over mixed movements."""
        use_method(core, tenant_id, method)
        moves = [
            movement(InventoryTransactionType.IN, 10, 5, on=date(2024, 1, 1)),
            movement(InventoryTransactionType.OUT, 3, on=date(2024, 1, 2)),
            movement(InventoryTransactionType.IN, 7, 6, on=date(2024, 1, 3)),
            movement(InventoryTransactionType.ADJUST, -2, on=date(2024, 1, 4)),
            movement(InventoryTransactionType.OUT, 8, on=date(2024, 1, 5)),
            movement(InventoryTransactionType.ADJUST, 4, on=date(2024, 1, 6)),
        ]
        for move in moves:
            core.inventory.apply_transaction(tenant_id, move)

        item = core.inventory.list_items(tenant_id)[0]
        lots = core.inventory.list_lots(tenant_id, SKU)

        assert item.quantity_on_hand == Decimal("8")  # 10 + 7 - 3 - 8 - 2 + 4
        assert sum(lot.quantity for lot in lots) == item.quantity_on_hand
        assert all(lot.quantity > 0 for lot in lots)
        assert len(core.inventory.list_transactions(tenant_id, SKU)) == len(moves)

    def test_leaving_avg_restates_lots(self, core, tenant_id, widget):
        """Test that switching AVG to FIFO rebuilds lots from on-hand at average cost."""
        use_method(core, tenant_id, ValuationMethod.AVG)
        receive_two_lots(core, tenant_id)
        core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 4))

        use_method(core, tenant_id, ValuationMethod.FIFO)
        lots = core.inventory.list_lots(tenant_id, SKU)

        assert [(lot.quantity, lot.unit_cost) for lot in lots] == [(Decimal("16"), Decimal("6.50"))]

        result = core.inventory.apply_transaction(tenant_id, movement(InventoryTransactionType.OUT, 16))
        assert result.cost_of_goods == Decimal("104.00")
        assert core.inventory.list_lots(tenant_id, SKU) == []

    def test_switch_between_lot_methods_keeps_lots(self, core, tenant_id, widget):
        """Test that FIFO to LIFO leaves the receipt lots untouched."""
        receive_two_lots(core, tenant_id)
        before = core.inventory.list_lots(tenant_id, SKU)

        use_method(core, tenant_id, ValuationMethod.LIFO)

        assert core.inventory.list_lots(tenant_id, SKU) == before


class TestValuationReport:
    """Tests for the valuation report."""

    def test_values_at_average_cost(self, core, tenant_id, widget):
        """Test that items are valued at quantity times average cost."""
        receive_two_lots(core, tenant_id)
        report = core.inventory.build_valuation_report(tenant_id, as_of=date(2024, 1, 31))

        assert report.as_of == date(2024, 1, 31)
        assert report.valuation_method == ValuationMethod.FIFO
        assert report.total_value == Decimal("130.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
