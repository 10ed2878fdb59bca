"""Data Transfer Objects for the API layer.

Request DTOs: Validate and parse incoming mutation requests.
Response DTOs: Structure and serialize API responses.
"""

from ricestock.application.dto.requests import (
    AdjustStockRequest,
    RecordPurchaseRequest,
    RecordSaleRequest,
    TransferStockRequest,
)
from ricestock.application.dto.responses import (
    AdjustmentResponse,
    AdjustStockResponse,
    ErrorResponse,
    HealthResponse,
    LedgerCheckResponse,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    LedgerMismatchResponse,
    LotStatusResponse,
    DatabaseHealthResponse,
    PurchaseResponse,
    RecordPurchaseResponse,
    RecordSaleResponse,
    SaleResponse,
    StockBalanceListResponse,
    StockBalanceResponse,
    TransferResponse,
    TransferStockResponse,
    VarietyMetricsResponse,
    WarehouseMetricsResponse,
)

__all__ = [
    # Requests
    "RecordPurchaseRequest",
    "RecordSaleRequest",
    "TransferStockRequest",
    "AdjustStockRequest",
    # Responses
    "StockBalanceResponse",
    "StockBalanceListResponse",
    "LedgerEntryResponse",
    "LedgerEntryListResponse",
    "PurchaseResponse",
    "SaleResponse",
    "TransferResponse",
    "AdjustmentResponse",
    "RecordPurchaseResponse",
    "RecordSaleResponse",
    "TransferStockResponse",
    "AdjustStockResponse",
    "WarehouseMetricsResponse",
    "LotStatusResponse",
    "VarietyMetricsResponse",
    "LedgerMismatchResponse",
    "LedgerCheckResponse",
    "DatabaseHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
