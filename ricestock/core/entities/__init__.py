"""Core domain entities."""

from ricestock.core.entities.ledger import (
    AdjustmentDirection,
    AdjustmentRecord,
    BusinessEvent,
    LedgerEntry,
    PurchaseRecord,
    SaleRecord,
    TransactionKind,
    TransferRecord,
)
from ricestock.core.entities.stock import (
    RiceVariety,
    StockBalance,
    StockLevel,
    Supplier,
    Warehouse,
    WarehouseStatus,
)

__all__ = [
    # Stock
    "RiceVariety",
    "StockBalance",
    "StockLevel",
    "Supplier",
    "Warehouse",
    "WarehouseStatus",
    # Ledger
    "AdjustmentDirection",
    "AdjustmentRecord",
    "BusinessEvent",
    "LedgerEntry",
    "PurchaseRecord",
    "SaleRecord",
    "TransactionKind",
    "TransferRecord",
]
