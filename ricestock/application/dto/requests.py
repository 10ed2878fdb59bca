"""Request DTOs for the ledger mutations.

Pydantic v2 models validated at the API boundary. Use cases re-check the
same rules, so Python callers that build requests without validation get
the same errors.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from ricestock.core.entities.ledger import AdjustmentDirection


class RecordPurchaseRequest(BaseModel):
    """Request to record inbound stock as a new lot."""

    warehouse_id: int = Field(..., description="Receiving warehouse ID")
    variety_id: int = Field(..., description="Rice variety ID")
    quantity: Decimal = Field(..., gt=0, description="Quantity received (kg)")
    unit_price: Decimal = Field(..., gt=0, description="Purchase price per kg")
    batch_label: str = Field(..., min_length=1, description="Batch number of the new lot")
    expiry_date: str | None = Field(
        default=None,
        description="Expiry date in ISO format",
    )
    supplier_id: int | None = Field(default=None, description="Supplier ID")
    invoice_number: str | None = Field(default=None, description="Supplier invoice number")
    purchase_date: str | None = Field(
        default=None,
        description="Purchase date in ISO format (defaults to today)",
    )
    notes: str | None = Field(default=None, description="Additional notes")


class RecordSaleRequest(BaseModel):
    """Request to sell stock out of one lot."""

    balance_id: int = Field(..., description="Lot to sell from")
    customer_name: str = Field(..., min_length=1, description="Customer name")
    quantity: Decimal = Field(..., gt=0, description="Quantity sold (kg)")
    sale_price: Decimal = Field(..., gt=0, description="Selling price per kg")
    sale_date: str = Field(..., description="Sale date in ISO format")
    invoice_number: str = Field(..., min_length=1, description="Sales invoice number")
    payment_method: str | None = Field(
        default=None,
        description="Payment method (defaults to the configured method, usually cash)",
        examples=["cash", "bank_transfer", "credit"],
    )
    notes: str | None = Field(default=None, description="Additional notes")


class TransferStockRequest(BaseModel):
    """Request to move stock from a lot into another warehouse."""

    balance_id: int = Field(..., description="Source lot")
    to_warehouse_id: int = Field(..., description="Destination warehouse ID")
    quantity: Decimal = Field(..., gt=0, description="Quantity to move (kg)")
    reason: str | None = Field(default=None, description="Reason for the transfer")


class AdjustStockRequest(BaseModel):
    """Request to correct a lot's quantity by hand."""

    balance_id: int = Field(..., description="Lot to adjust")
    direction: AdjustmentDirection = Field(..., description="increase or decrease")
    quantity: Decimal = Field(..., gt=0, description="Amount to adjust by (kg)")
    reason: str = Field(..., min_length=1, description="Reason for the adjustment")
