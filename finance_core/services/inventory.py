"""
Inventory Costing Engine

Keeps per-SKU running totals and receipt lots, and logs every movement.

DESIGN DECISION: Outbound movements are planned before anything changes.
The lot walk first works out which lots would be consumed; only when the
plan fully covers the quantity are lots, totals and the transaction log
touched. A failed movement therefore leaves no partial consumption.

COSTING:
- IN always refreshes the moving average cost, whatever the valuation method
- FIFO/LIFO consume lots oldest-first or newest-first
- AVG skips the lot walk and costs movements at the average
- ADJUST changes quantity on hand without touching the average cost
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from finance_core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from finance_core.models.common import ZERO, round_money, utc_now
from finance_core.models.inventory import (
    InventoryItem,
    InventoryItemInput,
    InventoryLot,
    InventoryTransaction,
    InventoryTransactionInput,
    InventoryTransactionResult,
    InventoryTransactionType,
    InventoryValuationLine,
    InventoryValuationReport,
    LotConsumption,
    ValuationMethod,
)
from finance_core.models.tenant import TenantFinanceData
from finance_core.services.base import TenantDatasetService


def plan_lot_consumption(
    sku: str,
    lots: list[InventoryLot],
    quantity: Decimal,
    method: ValuationMethod,
) -> list[LotConsumption]:
    """
    Work out which lots cover ``quantity`` without changing them.

    Lots are ordered by ``received_at``, ascending for FIFO and descending
    for LIFO; receipt order breaks ties.

    Raises:
        InsufficientStockError: If the open lots cannot cover ``quantity``
    """
    ordered = sorted(
        enumerate(lots),
        key=lambda pair: (pair[1].received_at, pair[0]),
        reverse=method == ValuationMethod.LIFO,
    )

    plan = []
    remaining = quantity
    for _, lot in ordered:
        if remaining <= 0:
            break
        if lot.quantity <= 0:
            continue
        take = min(lot.quantity, remaining)
        plan.append(LotConsumption(
            lot_id=lot.id,
            quantity=take,
            unit_cost=lot.unit_cost,
            received_at=lot.received_at,
        ))
        remaining -= take

    if remaining > 0:
        available = sum((lot.quantity for lot in lots), Decimal("0"))
        raise InsufficientStockError(sku, quantity, available)

    return plan


def _commit_consumption(data: TenantFinanceData, plan: list[LotConsumption]) -> None:
    """Apply a lot plan and drop lots that are used up."""
    taken = {consumption.lot_id: consumption.quantity for consumption in plan}
    for lot in data.inventory_lots:
        if lot.id in taken:
            lot.quantity -= taken[lot.id]
    data.inventory_lots = [lot for lot in data.inventory_lots if lot.quantity > 0]


def restate_lots_at_average(data: TenantFinanceData, on: date) -> int:
    """
    Replace every item's lots with one lot of its on-hand stock at average cost.

    AVG issues never touch lots, so after a period under AVG the lots no
    longer match on-hand. This runs before lot walking starts again.
    Returns the number of items restated.
    """
    lots = []
    for item in data.inventory_items:
        if item.quantity_on_hand > 0:
            lots.append(InventoryLot(
                sku=item.sku,
                quantity=item.quantity_on_hand,
                original_quantity=item.quantity_on_hand,
                unit_cost=item.average_cost,
                received_at=on,
            ))
    data.inventory_lots = lots
    return len(lots)


class InventoryService(TenantDatasetService):
    """Manages items, stock movements and valuation."""

    def list_items(self, tenant_id: str) -> list[InventoryItem]:
        return list(self._load(tenant_id).inventory_items)

    def list_lots(self, tenant_id: str, sku: Optional[str] = None) -> list[InventoryLot]:
        lots = self._load(tenant_id).inventory_lots
        return [lot for lot in lots if sku is None or lot.sku == sku]

    def list_transactions(self, tenant_id: str, sku: Optional[str] = None) -> list[InventoryTransaction]:
        transactions = self._load(tenant_id).inventory_transactions
        return [tx for tx in transactions if sku is None or tx.sku == sku]

    def upsert_item(self, tenant_id: str, item_input: InventoryItemInput) -> InventoryItem:
        """Create an item, or update the descriptive fields of an existing SKU."""
        data = self._load(tenant_id)
        item = data.find_item(item_input.sku)

        if item is not None:
            item.name = item_input.name
            item.uom = item_input.uom
            item.category = item_input.category
            if item_input.currency:
                item.currency = item_input.currency
            item.updated_at = utc_now()
        else:
            item = InventoryItem(
                sku=item_input.sku,
                name=item_input.name,
                uom=item_input.uom,
                category=item_input.category,
                currency=item_input.currency or data.settings.default_currency,
            )
            data.inventory_items.insert(0, item)

        self._save(data)
        self._log(tenant_id).info("inventory_item_upserted", sku=item.sku)
        return item

    def apply_transaction(
        self,
        tenant_id: str,
        tx_input: InventoryTransactionInput,
    ) -> InventoryTransactionResult:
        """
        Apply one stock movement and log it.

        Raises:
            NotFoundError: If the SKU has no item
            ValidationError: If the quantity or unit cost is invalid
            InsufficientStockError: If an outbound movement cannot be covered
        """
        data = self._load(tenant_id)
        item = data.find_item(tx_input.sku)
        if item is None:
            raise NotFoundError("Inventory item", tx_input.sku)

        method = data.settings.valuation_method
        tx_date = tx_input.date or date.today()

        if tx_input.type == InventoryTransactionType.IN:
            consumed, cost, unit_cost = self._receive(data, item, tx_input, tx_date)
        elif tx_input.type == InventoryTransactionType.OUT:
            consumed, cost, unit_cost = self._issue(data, item, tx_input.quantity, method)
        else:
            consumed, cost, unit_cost = self._adjust(data, item, tx_input, tx_date, method)

        consumed_stock = tx_input.type == InventoryTransactionType.OUT or (
            tx_input.type == InventoryTransactionType.ADJUST and tx_input.quantity < 0
        )
        item.updated_at = utc_now()
        transaction = InventoryTransaction(
            sku=item.sku,
            type=tx_input.type,
            quantity=tx_input.quantity,
            unit_cost=unit_cost,
            total_cost=cost,
            date=tx_date,
            reference_id=tx_input.reference_id,
            memo=tx_input.memo,
        )
        data.inventory_transactions.append(transaction)
        self._save(data)

        self._log(tenant_id).info(
            "inventory_transaction_applied",
            sku=item.sku,
            type=tx_input.type.value,
            quantity=str(tx_input.quantity),
            quantity_on_hand=str(item.quantity_on_hand),
            total_cost=str(cost),
            method=method.value,
        )
        return InventoryTransactionResult(
            item=item,
            transaction=transaction,
            consumed_lots=consumed,
            cost_of_goods=cost if consumed_stock else ZERO,
        )

    def _receive(
        self,
        data: TenantFinanceData,
        item: InventoryItem,
        tx_input: InventoryTransactionInput,
        tx_date: date,
    ) -> tuple[list[LotConsumption], Decimal, Decimal]:
        quantity = tx_input.quantity
        if quantity <= 0:
            raise ValidationError(f"Inbound quantity must be positive, got {quantity}")
        if tx_input.unit_cost is None or tx_input.unit_cost <= 0:
            raise ValidationError(
                f"Inbound stock for {item.sku} needs a positive unit cost"
            )

        unit_cost = tx_input.unit_cost
        on_hand = item.quantity_on_hand
        item.average_cost = round_money(
            (item.average_cost * on_hand + unit_cost * quantity) / (on_hand + quantity)
        )
        item.quantity_on_hand = on_hand + quantity

        data.inventory_lots.append(InventoryLot(
            sku=item.sku,
            quantity=quantity,
            original_quantity=quantity,
            unit_cost=unit_cost,
            received_at=tx_date,
        ))
        return [], round_money(unit_cost * quantity), unit_cost

    def _consume(
        self,
        data: TenantFinanceData,
        item: InventoryItem,
        quantity: Decimal,
        method: ValuationMethod,
    ) -> tuple[list[LotConsumption], Decimal, Decimal]:
        """Take ``quantity`` out of stock. Nothing changes if this raises."""
        if quantity > item.quantity_on_hand:
            raise InsufficientStockError(item.sku, quantity, item.quantity_on_hand)

        if method == ValuationMethod.AVG:
            consumed = []
            cost = round_money(item.average_cost * quantity)
            unit_cost = item.average_cost
        else:
            lots = [lot for lot in data.inventory_lots if lot.sku == item.sku]
            consumed = plan_lot_consumption(item.sku, lots, quantity, method)
            cost = round_money(sum((c.cost for c in consumed), ZERO))
            unit_cost = round_money(cost / quantity)
            _commit_consumption(data, consumed)

        item.quantity_on_hand -= quantity
        return consumed, cost, unit_cost

    def _issue(
        self,
        data: TenantFinanceData,
        item: InventoryItem,
        quantity: Decimal,
        method: ValuationMethod,
    ) -> tuple[list[LotConsumption], Decimal, Decimal]:
        if quantity <= 0:
            raise ValidationError(f"Outbound quantity must be positive, got {quantity}")
        return self._consume(data, item, quantity, method)

    def _adjust(
        self,
        data: TenantFinanceData,
        item: InventoryItem,
        tx_input: InventoryTransactionInput,
        tx_date: date,
        method: ValuationMethod,
    ) -> tuple[list[LotConsumption], Decimal, Decimal]:
        delta = tx_input.quantity
        if delta == 0:
            raise ValidationError("Adjustment quantity cannot be zero")

        if delta < 0:
            return self._consume(data, item, -delta, method)

        # Found stock enters at the current average cost
        item.quantity_on_hand += delta
        data.inventory_lots.append(InventoryLot(
            sku=item.sku,
            quantity=delta,
            original_quantity=delta,
            unit_cost=item.average_cost,
            received_at=tx_date,
        ))
        return [], round_money(item.average_cost * delta), item.average_cost

    def build_valuation_report(
        self,
        tenant_id: str,
        as_of: Optional[date] = None,
    ) -> InventoryValuationReport:
        """Value every item at quantity on hand times moving average cost."""
        data = self._load(tenant_id)

        lines = [
            InventoryValuationLine(
                sku=item.sku,
                name=item.name,
                uom=item.uom,
                quantity_on_hand=item.quantity_on_hand,
                average_cost=item.average_cost,
                value=item.value,
                currency=item.currency,
            )
            for item in data.inventory_items
        ]
        return InventoryValuationReport(
            as_of=as_of or date.today(),
            valuation_method=data.settings.valuation_method,
            items=lines,
            total_value=sum((line.value for line in lines), ZERO),
        )
