"""Response DTOs for the ledger API.

Pydantic v2 models for API response serialization. Decimal fields
serialize as strings, so quantities and money keep their exact values.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# --- Lots and ledger ---


class StockBalanceResponse(BaseModel):
    """Lot response DTO."""

    id: int
    warehouse_id: int
    variety_id: int
    quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal
    batch_label: str
    expiry_date: date | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class StockBalanceListResponse(BaseModel):
    """Paginated lot list."""

    items: list[StockBalanceResponse]
    total: int
    limit: int
    offset: int


class LedgerEntryResponse(BaseModel):
    """Ledger entry response DTO."""

    id: int
    kind: str
    reference_id: int
    balance_id: int
    quantity_delta: Decimal
    notes: str | None = None
    actor: str
    created_at: datetime


class LedgerEntryListResponse(BaseModel):
    items: list[LedgerEntryResponse]
    total: int


# --- Business event records ---


class PurchaseResponse(BaseModel):
    id: int
    balance_id: int
    warehouse_id: int
    variety_id: int
    supplier_id: int | None = None
    invoice_number: str | None = None
    purchase_date: date
    quantity: Decimal
    unit_price: Decimal
    total: Decimal
    notes: str | None = None
    actor: str
    created_at: datetime


class SaleResponse(BaseModel):
    id: int
    balance_id: int
    customer_name: str
    quantity: Decimal
    sale_price: Decimal
    cost_basis: Decimal = Field(..., description="Lot unit cost at the moment of sale")
    total: Decimal
    profit_loss: Decimal = Field(..., description="Profit (negative for a loss) at sale time")
    sale_date: date
    invoice_number: str
    payment_method: str
    notes: str | None = None
    actor: str
    created_at: datetime


class TransferResponse(BaseModel):
    id: int
    source_balance_id: int
    destination_balance_id: int
    from_warehouse_id: int
    to_warehouse_id: int
    quantity: Decimal
    reason: str | None = None
    actor: str
    created_at: datetime


class AdjustmentResponse(BaseModel):
    id: int
    balance_id: int
    direction: str
    quantity: Decimal
    previous_quantity: Decimal
    new_quantity: Decimal
    reason: str
    actor: str
    created_at: datetime


# --- Mutation results ---


class RecordPurchaseResponse(BaseModel):
    """Response for a recorded purchase."""

    balance: StockBalanceResponse
    purchase: PurchaseResponse
    entry: LedgerEntryResponse


class RecordSaleResponse(BaseModel):
    """Response for a recorded sale."""

    balance: StockBalanceResponse
    sale: SaleResponse
    entry: LedgerEntryResponse


class TransferStockResponse(BaseModel):
    """Response for a stock transfer."""

    source: StockBalanceResponse
    destination: StockBalanceResponse
    transfer: TransferResponse
    entries: list[LedgerEntryResponse]
    destination_created: bool = False  # True if the transfer opened a new lot


class AdjustStockResponse(BaseModel):
    """Response for a stock adjustment."""

    balance: StockBalanceResponse
    adjustment: AdjustmentResponse
    entry: LedgerEntryResponse


# --- Metrics ---


class WarehouseMetricsResponse(BaseModel):
    """Stock held in one warehouse."""

    warehouse_id: int
    name: str
    capacity: Decimal
    lot_count: int
    total_quantity: Decimal
    total_value: Decimal
    utilization_pct: Decimal = Field(..., description="Occupied capacity in percent, unclamped")
    utilization_display_pct: Decimal = Field(..., description="Utilization clamped to 0..100")


class LotStatusResponse(BaseModel):
    balance_id: int
    warehouse_id: int
    batch_label: str
    quantity: Decimal
    stock_level: str


class VarietyMetricsResponse(BaseModel):
    """Stock and sales figures for one variety."""

    variety_id: int
    name: str
    minimum_stock_level: Decimal
    total_quantity: Decimal
    total_value: Decimal
    lots: list[LotStatusResponse]
    start_date: date | None = None
    end_date: date | None = None
    sales_count: int
    quantity_sold: Decimal
    revenue: Decimal
    profit_loss: Decimal
    profit_margin_pct: Decimal


class LedgerMismatchResponse(BaseModel):
    balance_id: int
    balance_quantity: Decimal
    ledger_quantity: Decimal
    difference: Decimal


class LedgerCheckResponse(BaseModel):
    """Result of comparing every lot quantity with its ledger sum."""

    checked: int
    consistent: bool
    mismatches: list[LedgerMismatchResponse]


# --- Health / errors ---


class DatabaseHealthResponse(BaseModel):
    """Ledger database reachability and pool occupancy."""

    available: bool
    latency_ms: float | None = None
    schema_version: str | None = None
    pool_size: int | None = None
    pool_available: int | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: DatabaseHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
