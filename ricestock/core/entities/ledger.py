"""Ledger domain entities: transaction log entries and business event records."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ricestock.core.clock import utc_now


class TransactionKind(str, Enum):
    """Kinds of quantity-affecting business events."""

    PURCHASE = "purchase"
    SALE = "sale"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"


class AdjustmentDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class LedgerEntry(BaseModel):
    """One immutable record of a quantity change on one lot.

    Summing quantity_delta over a lot's entries up to any instant gives the
    lot's quantity at that instant.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    kind: TransactionKind
    reference_id: int  # id of the purchase / sale / transfer / adjustment record
    balance_id: int  # FK → stock_balances.id
    quantity_delta: Decimal  # positive for increases, negative for decreases
    notes: str | None = None
    actor: str
    created_at: datetime = Field(default_factory=utc_now)


class PurchaseRecord(BaseModel):
    """Inbound stock: always opens a new lot."""

    kind: Literal[TransactionKind.PURCHASE] = TransactionKind.PURCHASE
    id: int | None = None
    balance_id: int
    warehouse_id: int
    variety_id: int
    supplier_id: int | None = None
    invoice_number: str | None = None
    purchase_date: date
    quantity: Decimal
    unit_price: Decimal
    total: Decimal  # quantity * unit_price
    notes: str | None = None
    actor: str
    created_at: datetime = Field(default_factory=utc_now)


class SaleRecord(BaseModel):
    """Outbound stock with a profit/loss snapshot.

    cost_basis is the lot's unit cost at the moment of sale. profit_loss is
    computed once from it and stored; later cost changes on the lot never
    touch it.
    """

    kind: Literal[TransactionKind.SALE] = TransactionKind.SALE
    id: int | None = None
    balance_id: int
    customer_name: str
    quantity: Decimal
    sale_price: Decimal
    cost_basis: Decimal
    total: Decimal  # quantity * sale_price
    profit_loss: Decimal  # (sale_price - cost_basis) * quantity
    sale_date: date
    invoice_number: str
    payment_method: str = "cash"
    notes: str | None = None
    actor: str
    created_at: datetime = Field(default_factory=utc_now)


class TransferRecord(BaseModel):
    """Warehouse-to-warehouse move between two lots of the same variety."""

    kind: Literal[TransactionKind.TRANSFER] = TransactionKind.TRANSFER
    id: int | None = None
    source_balance_id: int
    destination_balance_id: int
    from_warehouse_id: int
    to_warehouse_id: int
    quantity: Decimal
    reason: str | None = None
    actor: str
    created_at: datetime = Field(default_factory=utc_now)


class AdjustmentRecord(BaseModel):
    """Manual correction of a lot's quantity."""

    kind: Literal[TransactionKind.ADJUSTMENT] = TransactionKind.ADJUSTMENT
    id: int | None = None
    balance_id: int
    direction: AdjustmentDirection
    quantity: Decimal
    previous_quantity: Decimal
    new_quantity: Decimal
    reason: str
    actor: str
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def signed_delta(self) -> Decimal:
        return self.new_quantity - self.previous_quantity


BusinessEvent = Annotated[
    PurchaseRecord | SaleRecord | TransferRecord | AdjustmentRecord,
    Field(discriminator="kind"),
]
