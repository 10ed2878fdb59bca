"""Stock domain entities: lots and the master records they point at."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from ricestock.core.clock import utc_now


class WarehouseStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class StockLevel(str, Enum):
    """Stock level status of a lot relative to its variety minimum level."""

    LOW = "low"
    MEDIUM = "medium"
    SAFE = "safe"


class Warehouse(BaseModel):
    """Warehouse master record. Read-only to the ledger."""

    id: int | None = None
    name: str
    location: str | None = None
    capacity: Decimal  # kg
    manager_name: str | None = None
    status: WarehouseStatus = WarehouseStatus.ACTIVE


class RiceVariety(BaseModel):
    """Rice variety master record. Read-only to the ledger."""

    id: int | None = None
    name: str
    type: str | None = None
    minimum_stock_level: Decimal = Decimal("0")  # kg
    description: str | None = None


class Supplier(BaseModel):
    """Supplier master record. Read-only to the ledger."""

    id: int | None = None
    name: str
    contact_person: str | None = None
    phone: str | None = None


class StockBalance(BaseModel):
    """One lot of a variety sitting in one warehouse.

    Created by a purchase or by a transfer landing in a warehouse that holds
    no lot of the variety yet. Never deleted: a lot that reaches zero stays
    as a historical record.
    """

    id: int | None = None
    warehouse_id: int  # FK → warehouses.id
    variety_id: int  # FK → rice_varieties.id
    quantity: Decimal = Decimal("0")  # kg, never negative
    unit_cost: Decimal = Decimal("0")
    batch_label: str
    expiry_date: date | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def total_value(self) -> Decimal:
        """Total lot value = quantity * unit_cost."""
        return self.quantity * self.unit_cost

    @property
    def is_empty(self) -> bool:
        return self.quantity == 0
