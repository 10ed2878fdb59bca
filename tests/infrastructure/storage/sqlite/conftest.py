"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path

import aiosqlite
import pytest

from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import LedgerEntry, TransactionKind
from ricestock.core.entities.stock import StockBalance
from ricestock.infrastructure.storage.sqlite import SQLiteLedgerStore, SQLiteMasterDataStore


@pytest.fixture
def ledger_store(ledger_db: Path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
def master_data_store(ledger_db: Path) -> SQLiteMasterDataStore:
    return SQLiteMasterDataStore()


@pytest.fixture
async def raw_conn(ledger_db: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """A connection outside the pool, for poking at the schema directly."""
    async with aiosqlite.connect(ledger_db) as conn:
        conn.row_factory = aiosqlite.Row
        yield conn


async def open_lot(
    store: SQLiteLedgerStore,
    quantity: str = "100",
    warehouse_id: int = 1,
    variety_id: int = 1,
    label: str = "BAS-001",
    unit_cost: str = "2.50",
) -> StockBalance:
    """Insert a lot and its opening ledger entry in one unit of work."""
    async with store.unit_of_work() as uow:
        balance = await uow.insert_balance(
            StockBalance(
                warehouse_id=warehouse_id,
                variety_id=variety_id,
                quantity=Decimal(quantity),
                unit_cost=Decimal(unit_cost),
                batch_label=label,
                created_by="tester",
            )
        )
        await uow.append_entry(
            LedgerEntry(
                kind=TransactionKind.PURCHASE,
                reference_id=1,
                balance_id=balance.id,
                quantity_delta=Decimal(quantity),
                actor="tester",
                created_at=utc_now(),
            )
        )
    return balance


@pytest.fixture
def lot_factory(ledger_store):
    async def factory(**kwargs) -> StockBalance:
        return await open_lot(ledger_store, **kwargs)

    return factory
