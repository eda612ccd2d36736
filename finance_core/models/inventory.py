"""
Inventory Costing Models

Stock is tracked per SKU with two views of cost:
- a moving average cost on the item (used for valuation reports)
- open receipt lots consumed in FIFO or LIFO order

Transactions are an append-only log of every movement.
"""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from finance_core.models.common import ZERO, Money, utc_now


class ValuationMethod(str, Enum):
    """Order in which receipt lots are consumed."""
    FIFO = "FIFO"  # First In, First Out
    LIFO = "LIFO"  # Last In, First Out
    AVG = "AVG"    # Moving average only, no lot walk


class InventoryTransactionType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUST = "ADJUST"  # Stock-take correction, signed quantity


class InventoryItemInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    uom: str = Field(
        ...,
        min_length=1,
        description="Unit of measure (e.g., each, kg, box)"
    )
    category: Optional[str] = None
    currency: Optional[str] = None


class InventoryItem(BaseModel):
    """Running totals for one SKU. Updated in place by transactions."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    sku: str
    name: str
    uom: str
    category: Optional[str] = None
    quantity_on_hand: Decimal = Decimal("0")
    average_cost: Money = ZERO
    currency: str

    @property
    def value(self) -> Decimal:
        return self.quantity_on_hand * self.average_cost


class InventoryLot(BaseModel):
    """A receipt of stock at one unit cost, consumed over time."""

    id: UUID = Field(default_factory=uuid4)
    sku: str
    quantity: Decimal = Field(
        ...,
        ge=0,
        description="Quantity still unconsumed"
    )
    original_quantity: Decimal = Field(..., gt=0)
    unit_cost: Money
    received_at: date


class InventoryTransactionInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    sku: str = Field(..., min_length=1)
    type: InventoryTransactionType
    quantity: Decimal
    unit_cost: Optional[Money] = None
    date: Optional[dt.date] = None
    reference_id: Optional[str] = None
    memo: Optional[str] = None


class InventoryTransaction(BaseModel):
    """Immutable log row for one stock movement."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)

    sku: str
    type: InventoryTransactionType
    quantity: Decimal
    unit_cost: Optional[Money] = None
    total_cost: Money = ZERO
    date: date
    reference_id: Optional[str] = None
    memo: Optional[str] = None


class LotConsumption(BaseModel):
    """How much of one lot an outbound movement used."""
    model_config = ConfigDict(frozen=True)

    lot_id: UUID
    quantity: Decimal
    unit_cost: Money
    received_at: date

    @property
    def cost(self) -> Money:
        return self.quantity * self.unit_cost


class InventoryTransactionResult(BaseModel):
    item: InventoryItem
    transaction: InventoryTransaction
    consumed_lots: list[LotConsumption] = Field(default_factory=list)
    cost_of_goods: Money = ZERO


class InventoryValuationLine(BaseModel):
    sku: str
    name: str
    uom: str
    quantity_on_hand: Decimal
    average_cost: Money
    value: Money
    currency: str


class InventoryValuationReport(BaseModel):
    """Stock value at moving average cost."""

    generated_at: datetime = Field(default_factory=utc_now)
    as_of: Optional[date] = None
    valuation_method: ValuationMethod
    items: list[InventoryValuationLine] = Field(default_factory=list)
    total_value: Money = ZERO
