"""
Dependency injection container for FastAPI.

Provides stores, use cases and the acting user to route handlers.
"""

from fastapi import Header

from ricestock.application.use_cases import (
    AdjustStockUseCase,
    GetVarietyMetricsUseCase,
    GetWarehouseMetricsUseCase,
    RecordPurchaseUseCase,
    RecordSaleUseCase,
    TransferStockUseCase,
    VerifyLedgerUseCase,
)
from ricestock.core.exceptions import MissingActorError
from ricestock.infrastructure.storage.sqlite import SQLiteLedgerStore, get_ledger_store


# Actor
def get_actor(x_actor: str | None = Header(default=None)) -> str:
    """Identity of the user issuing a mutation, from the X-Actor header."""
    if x_actor is None or not x_actor.strip():
        raise MissingActorError()
    return x_actor.strip()


# Store dependencies
async def get_ledger() -> SQLiteLedgerStore:
    """Get ledger store."""
    return await get_ledger_store()


# Mutation use cases
def get_record_purchase_use_case() -> RecordPurchaseUseCase:
    return RecordPurchaseUseCase()


def get_record_sale_use_case() -> RecordSaleUseCase:
    return RecordSaleUseCase()


def get_transfer_stock_use_case() -> TransferStockUseCase:
    return TransferStockUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    return AdjustStockUseCase()


# Read use cases
def get_warehouse_metrics_use_case() -> GetWarehouseMetricsUseCase:
    return GetWarehouseMetricsUseCase()


def get_variety_metrics_use_case() -> GetVarietyMetricsUseCase:
    return GetVarietyMetricsUseCase()


def get_verify_ledger_use_case() -> VerifyLedgerUseCase:
    return VerifyLedgerUseCase()
