"""
End-to-end ledger flows against a real SQLite database.

Each mutation must leave every lot quantity equal to the sum of its ledger
entries, and a failed mutation must leave no trace at all.
"""

import asyncio
import sqlite3
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from ricestock.application.dto.requests import (
    AdjustStockRequest,
    RecordPurchaseRequest,
    RecordSaleRequest,
    TransferStockRequest,
)
from ricestock.application.use_cases import (
    AdjustStockUseCase,
    GetVarietyMetricsUseCase,
    GetWarehouseMetricsUseCase,
    RecordPurchaseUseCase,
    RecordSaleUseCase,
    TransferStockUseCase,
    VerifyLedgerUseCase,
)
from ricestock.core.entities.ledger import TransactionKind
from ricestock.core.entities.stock import StockLevel
from ricestock.core.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    StorageFailureError,
    WarehouseNotFoundError,
)
from ricestock.infrastructure.storage.sqlite import (
    SQLiteLedgerStore,
    SQLiteLedgerUnitOfWork,
    SQLiteMasterDataStore,
)


@pytest.fixture
def store(ledger_db: Path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
def master(ledger_db: Path) -> SQLiteMasterDataStore:
    return SQLiteMasterDataStore()


async def _purchase(store, quantity: str = "100", price: str = "2.50", warehouse_id: int = 1, label: str = "BAS-001"):
    return await RecordPurchaseUseCase(ledger_store=store).execute(
        RecordPurchaseRequest(
            warehouse_id=warehouse_id,
            variety_id=1,
            quantity=Decimal(quantity),
            unit_price=Decimal(price),
            batch_label=label,
            supplier_id=1,
            invoice_number="P-1",
            purchase_date="2026-01-05",
        ),
        actor="clerk",
    )


def _sale(balance_id: int, quantity: str, price: str = "3.00", invoice: str = "S-1") -> RecordSaleRequest:
    return RecordSaleRequest(
        balance_id=balance_id,
        customer_name="Shop A",
        quantity=Decimal(quantity),
        sale_price=Decimal(price),
        sale_date="2026-01-06",
        invoice_number=invoice,
    )


async def _assert_ledger_consistent(store) -> None:
    result = await VerifyLedgerUseCase(ledger_store=store).execute()
    assert result.consistent, result.mismatches


class TestPurchaseSaleFlow:
    @pytest.mark.asyncio
    async def test_purchase_then_sale(self, store):
        purchase = await _purchase(store)
        lot_id = purchase.balance.id

        sale = await RecordSaleUseCase(ledger_store=store).execute(_sale(lot_id, "40"), actor="clerk")

        stored = await store.get_balance(lot_id)
        assert stored.quantity == Decimal("60")
        assert sale.sale.total == Decimal("120.00")
        assert sale.sale.profit_loss == Decimal("20.00")
        assert await store.ledger_quantity(lot_id) == Decimal("60")
        await _assert_ledger_consistent(store)

    @pytest.mark.asyncio
    async def test_entries_reference_their_records(self, store):
        purchase = await _purchase(store)
        sale = await RecordSaleUseCase(ledger_store=store).execute(
            _sale(purchase.balance.id, "10"), actor="clerk"
        )

        entries = await store.list_entries(balance_id=purchase.balance.id)

        assert [e.kind for e in entries] == [TransactionKind.SALE, TransactionKind.PURCHASE]
        assert entries[0].reference_id == sale.sale.id
        assert entries[1].reference_id == purchase.purchase.id
        assert all(e.actor == "clerk" for e in entries)

    @pytest.mark.asyncio
    async def test_insufficient_stock_leaves_no_trace(self, store):
        purchase = await _purchase(store)
        lot_id = purchase.balance.id

        with pytest.raises(InsufficientStockError):
            await RecordSaleUseCase(ledger_store=store).execute(_sale(lot_id, "150"), actor="clerk")

        assert (await store.get_balance(lot_id)).quantity == Decimal("100")
        assert len(await store.list_entries()) == 1
        assert await store.list_sales() == []

    @pytest.mark.asyncio
    async def test_sale_snapshot_survives_later_purchases(self, store):
        first = await _purchase(store, price="2.50")
        await _purchase(store, price="9.99", label="BAS-002")

        sale = await RecordSaleUseCase(ledger_store=store).execute(
            _sale(first.balance.id, "10", price="3.00"), actor="clerk"
        )

        stored = await store.get_sale(sale.sale.id)
        assert stored.cost_basis == Decimal("2.50")
        assert stored.profit_loss == Decimal("5.00")


class TestTransferFlow:
    @pytest.mark.asyncio
    async def test_transfer_opens_destination_lot(self, store):
        purchase = await _purchase(store)

        result = await TransferStockUseCase(ledger_store=store).execute(
            TransferStockRequest(balance_id=purchase.balance.id, to_warehouse_id=2, quantity=Decimal("30")),
            actor="clerk",
        )

        source = await store.get_balance(purchase.balance.id)
        destination = await store.get_balance(result.destination.id)
        assert source.quantity == Decimal("70")
        assert destination.quantity == Decimal("30")
        assert destination.warehouse_id == 2
        assert destination.batch_label == "BAS-001-TR"
        assert destination.unit_cost == Decimal("2.50")
        assert len(await store.list_entries(kind=TransactionKind.TRANSFER)) == 2
        await _assert_ledger_consistent(store)

    @pytest.mark.asyncio
    async def test_second_transfer_merges_into_same_lot(self, store):
        purchase = await _purchase(store)
        use_case = TransferStockUseCase(ledger_store=store)
        request = TransferStockRequest(balance_id=purchase.balance.id, to_warehouse_id=2, quantity=Decimal("10"))

        first = await use_case.execute(request, actor="clerk")
        second = await use_case.execute(request, actor="clerk")

        assert second.destination_created is False
        assert second.destination.id == first.destination.id
        assert (await store.get_balance(first.destination.id)).quantity == Decimal("20")
        assert len(await store.list_balances(warehouse_id=2)) == 1
        await _assert_ledger_consistent(store)

    @pytest.mark.asyncio
    async def test_rejected_transfers_write_nothing(self, store):
        purchase = await _purchase(store)
        use_case = TransferStockUseCase(ledger_store=store)

        with pytest.raises(WarehouseNotFoundError):
            await use_case.execute(
                TransferStockRequest(balance_id=purchase.balance.id, to_warehouse_id=99, quantity=Decimal("1")),
                actor="clerk",
            )
        with pytest.raises(InvalidInputError):
            await use_case.execute(
                TransferStockRequest(balance_id=purchase.balance.id, to_warehouse_id=1, quantity=Decimal("1")),
                actor="clerk",
            )
        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                TransferStockRequest(balance_id=purchase.balance.id, to_warehouse_id=2, quantity=Decimal("101")),
                actor="clerk",
            )

        assert len(await store.list_balances()) == 1
        assert len(await store.list_entries()) == 1


class TestAdjustmentFlow:
    @pytest.mark.asyncio
    async def test_adjustments_are_ledgered(self, store):
        purchase = await _purchase(store)
        use_case = AdjustStockUseCase(ledger_store=store)
        lot_id = purchase.balance.id

        await use_case.execute(
            AdjustStockRequest(balance_id=lot_id, direction="decrease", quantity=Decimal("7.5"), reason="spillage"),
            actor="auditor",
        )
        await use_case.execute(
            AdjustStockRequest(balance_id=lot_id, direction="increase", quantity=Decimal("2"), reason="recount"),
            actor="auditor",
        )

        assert (await store.get_balance(lot_id)).quantity == Decimal("94.5")
        assert len(await store.list_entries(kind=TransactionKind.ADJUSTMENT)) == 2
        await _assert_ledger_consistent(store)

    @pytest.mark.asyncio
    async def test_adjustment_below_zero_rejected(self, store):
        purchase = await _purchase(store, quantity="5")

        with pytest.raises(InvalidInputError):
            await AdjustStockUseCase(ledger_store=store).execute(
                AdjustStockRequest(
                    balance_id=purchase.balance.id, direction="decrease", quantity=Decimal("6"), reason="loss"
                ),
                actor="auditor",
            )

        assert (await store.get_balance(purchase.balance.id)).quantity == Decimal("5")


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_sales_never_oversell(self, store):
        purchase = await _purchase(store)
        lot_id = purchase.balance.id
        use_case = RecordSaleUseCase(ledger_store=store)

        results = await asyncio.gather(
            use_case.execute(_sale(lot_id, "60", invoice="S-1"), actor="clerk-1"),
            use_case.execute(_sale(lot_id, "60", invoice="S-2"), actor="clerk-2"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert (await store.get_balance(lot_id)).quantity == Decimal("40")
        assert len(await store.list_sales()) == 1
        await _assert_ledger_consistent(store)

    @pytest.mark.asyncio
    async def test_concurrent_small_sales_all_apply(self, store):
        purchase = await _purchase(store)
        lot_id = purchase.balance.id
        use_case = RecordSaleUseCase(ledger_store=store)

        await asyncio.gather(
            *(use_case.execute(_sale(lot_id, "10", invoice=f"S-{i}"), actor="clerk") for i in range(5))
        )

        assert (await store.get_balance(lot_id)).quantity == Decimal("50")
        await _assert_ledger_consistent(store)


class TestStorageFailure:
    @pytest.mark.asyncio
    async def test_failed_ledger_write_rolls_back_everything(self, store):
        purchase = await _purchase(store)
        lot_id = purchase.balance.id
        use_case = RecordSaleUseCase(ledger_store=store)

        with patch.object(
            SQLiteLedgerUnitOfWork,
            "append_entry",
            AsyncMock(side_effect=sqlite3.OperationalError("disk I/O error")),
        ):
            with pytest.raises(StorageFailureError):
                await use_case.execute(_sale(lot_id, "40"), actor="clerk")

        assert (await store.get_balance(lot_id)).quantity == Decimal("100")
        assert await store.list_sales() == []

        await use_case.execute(_sale(lot_id, "40"), actor="clerk")

        assert (await store.get_balance(lot_id)).quantity == Decimal("60")
        assert len(await store.list_sales()) == 1
        assert len(await store.list_entries(kind=TransactionKind.SALE)) == 1
        await _assert_ledger_consistent(store)


class TestMetricsFlow:
    @pytest.mark.asyncio
    async def test_warehouse_metrics(self, store, master):
        await _purchase(store, quantity="250")
        await _purchase(store, quantity="150", price="3", label="BAS-002")

        result = await GetWarehouseMetricsUseCase(ledger_store=store, master_data_store=master).execute(1)

        assert result.total_quantity == Decimal("400")
        assert result.total_value == Decimal("1075.00")
        assert result.utilization_pct == Decimal("40")

    @pytest.mark.asyncio
    async def test_variety_metrics(self, store, master):
        purchase = await _purchase(store, quantity="100")
        await RecordSaleUseCase(ledger_store=store).execute(
            _sale(purchase.balance.id, "80"), actor="clerk"
        )

        result = await GetVarietyMetricsUseCase(ledger_store=store, master_data_store=master).execute(
            1, "2026-01-01", "2026-01-31"
        )

        assert result.levels[purchase.balance.id] == StockLevel.LOW
        assert result.profit_loss == Decimal("40.00")
        assert result.revenue == Decimal("240.00")
