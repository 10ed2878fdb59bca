"""Application use cases."""

from ricestock.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from ricestock.application.use_cases.record_purchase import (
    RecordPurchaseResult,
    RecordPurchaseUseCase,
)
from ricestock.application.use_cases.record_sale import RecordSaleResult, RecordSaleUseCase
from ricestock.application.use_cases.stock_metrics import (
    GetVarietyMetricsUseCase,
    GetWarehouseMetricsUseCase,
    VarietyMetricsResult,
    WarehouseMetricsResult,
)
from ricestock.application.use_cases.transfer_stock import (
    TransferStockResult,
    TransferStockUseCase,
)
from ricestock.application.use_cases.verify_ledger import LedgerCheckResult, VerifyLedgerUseCase

__all__ = [
    "RecordPurchaseUseCase",
    "RecordPurchaseResult",
    "RecordSaleUseCase",
    "RecordSaleResult",
    "TransferStockUseCase",
    "TransferStockResult",
    "AdjustStockUseCase",
    "AdjustStockResult",
    "GetWarehouseMetricsUseCase",
    "WarehouseMetricsResult",
    "GetVarietyMetricsUseCase",
    "VarietyMetricsResult",
    "VerifyLedgerUseCase",
    "LedgerCheckResult",
]
