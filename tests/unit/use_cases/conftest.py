"""Fixtures for use case unit tests: a ledger store whose unit of work is a mock."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from ricestock.core.entities.stock import RiceVariety, StockBalance, Supplier, Warehouse


@pytest.fixture
def uow():
    uow = AsyncMock()
    uow.get_warehouse.return_value = Warehouse(id=2, name="North Depot", capacity=Decimal("500"))
    uow.get_variety.return_value = RiceVariety(id=1, name="Basmati")
    uow.get_supplier.return_value = Supplier(id=1, name="Delta Mills")
    uow.find_lot.return_value = None

    next_id = iter(range(100, 1000))

    async def insert_balance(balance: StockBalance) -> StockBalance:
        balance.id = next(next_id)
        return balance

    async def with_id(record):
        record.id = next(next_id)
        return record

    async def append_entry(entry):
        return entry.model_copy(update={"id": next(next_id)})

    uow.insert_balance.side_effect = insert_balance
    uow.update_balance_quantity.side_effect = lambda balance: balance
    uow.add_purchase.side_effect = with_id
    uow.add_sale.side_effect = with_id
    uow.add_transfer.side_effect = with_id
    uow.add_adjustment.side_effect = with_id
    uow.append_entry.side_effect = append_entry
    return uow


@pytest.fixture
def ledger_store(uow):
    store = MagicMock()
    store.unit_of_work.return_value.__aenter__.return_value = uow
    store.unit_of_work.return_value.__aexit__.return_value = False
    return store


@pytest.fixture
def lot() -> StockBalance:
    """100 kg of Basmati at 2.50 in the main warehouse."""
    return StockBalance(
        id=1,
        warehouse_id=1,
        variety_id=1,
        quantity=Decimal("100"),
        unit_cost=Decimal("2.50"),
        batch_label="BAS-001",
    )
