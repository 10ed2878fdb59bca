"""Shared fixtures for API tests: an ASGI client and prebuilt ledger entities."""

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from ricestock.api.main import app
from ricestock.core.entities.ledger import LedgerEntry, TransactionKind
from ricestock.core.entities.stock import StockBalance


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def lot() -> StockBalance:
    return StockBalance(
        id=1,
        warehouse_id=1,
        variety_id=1,
        quantity=Decimal("100"),
        unit_cost=Decimal("2.50"),
        batch_label="BAS-001",
        expiry_date=date(2027, 1, 1),
        created_by="clerk",
    )


@pytest.fixture
def make_entry():
    def factory(kind: TransactionKind, delta: str, balance_id: int = 1, entry_id: int = 1) -> LedgerEntry:
        return LedgerEntry(
            id=entry_id,
            kind=kind,
            reference_id=1,
            balance_id=balance_id,
            quantity_delta=Decimal(delta),
            actor="clerk",
        )

    return factory
