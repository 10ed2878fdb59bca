"""SQLite implementation of lot balances, the transaction ledger and event records."""

import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from decimal import Decimal

import aiosqlite

from ricestock.config import get_logger
from ricestock.core.clock import utc_now
from ricestock.core.entities.ledger import (
    AdjustmentDirection,
    AdjustmentRecord,
    LedgerEntry,
    PurchaseRecord,
    SaleRecord,
    TransactionKind,
    TransferRecord,
)
from ricestock.core.entities.stock import RiceVariety, StockBalance, Supplier, Warehouse
from ricestock.core.exceptions import CorruptRecordError, StorageFailureError
from ricestock.core.interfaces.ledger_store import ILedgerStore, ILedgerUnitOfWork
from ricestock.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from ricestock.infrastructure.storage.sqlite.master_data_store import (
    row_to_supplier,
    row_to_variety,
    row_to_warehouse,
)

logger = get_logger(__name__)


def _dec(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _date(row: aiosqlite.Row, column: str) -> date:
    value = row[column]
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError) as e:
        raise CorruptRecordError(column, value) from e


def _optional_date(row: aiosqlite.Row, column: str) -> date | None:
    return None if row[column] is None else _date(row, column)


def _datetime(row: aiosqlite.Row, column: str) -> datetime:
    value = row[column]
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError) as e:
        raise CorruptRecordError(column, value) from e


class _RowMapper:
    """Row to entity conversion shared by the store and its unit of work."""

    @staticmethod
    def _row_to_balance(row: aiosqlite.Row) -> StockBalance:
        return StockBalance(
            id=row["id"],
            warehouse_id=row["warehouse_id"],
            variety_id=row["variety_id"],
            quantity=_dec(row["quantity"]),
            unit_cost=_dec(row["unit_cost"]),
            batch_label=row["batch_label"],
            expiry_date=_optional_date(row, "expiry_date"),
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=_datetime(row, "created_at"),
            updated_at=_datetime(row, "updated_at"),
        )

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> LedgerEntry:
        return LedgerEntry(
            id=row["id"],
            kind=TransactionKind(row["kind"]),
            reference_id=row["reference_id"],
            balance_id=row["balance_id"],
            quantity_delta=_dec(row["quantity_delta"]),
            notes=row["notes"],
            actor=row["actor"],
            created_at=_datetime(row, "created_at"),
        )

    @staticmethod
    def _row_to_purchase(row: aiosqlite.Row) -> PurchaseRecord:
        return PurchaseRecord(
            id=row["id"],
            balance_id=row["balance_id"],
            warehouse_id=row["warehouse_id"],
            variety_id=row["variety_id"],
            supplier_id=row["supplier_id"],
            invoice_number=row["invoice_number"],
            purchase_date=_date(row, "purchase_date"),
            quantity=_dec(row["quantity"]),
            unit_price=_dec(row["unit_price"]),
            total=_dec(row["total"]),
            notes=row["notes"],
            actor=row["actor"],
            created_at=_datetime(row, "created_at"),
        )

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row) -> SaleRecord:
        return SaleRecord(
            id=row["id"],
            balance_id=row["balance_id"],
            customer_name=row["customer_name"],
            quantity=_dec(row["quantity"]),
            sale_price=_dec(row["sale_price"]),
            cost_basis=_dec(row["cost_basis"]),
            total=_dec(row["total"]),
            profit_loss=_dec(row["profit_loss"]),
            sale_date=_date(row, "sale_date"),
            invoice_number=row["invoice_number"],
            payment_method=row["payment_method"],
            notes=row["notes"],
            actor=row["actor"],
            created_at=_datetime(row, "created_at"),
        )

    @staticmethod
    def _row_to_transfer(row: aiosqlite.Row) -> TransferRecord:
        return TransferRecord(
            id=row["id"],
            source_balance_id=row["source_balance_id"],
            destination_balance_id=row["destination_balance_id"],
            from_warehouse_id=row["from_warehouse_id"],
            to_warehouse_id=row["to_warehouse_id"],
            quantity=_dec(row["quantity"]),
            reason=row["reason"],
            actor=row["actor"],
            created_at=_datetime(row, "created_at"),
        )

    @staticmethod
    def _row_to_adjustment(row: aiosqlite.Row) -> AdjustmentRecord:
        return AdjustmentRecord(
            id=row["id"],
            balance_id=row["balance_id"],
            direction=AdjustmentDirection(row["direction"]),
            quantity=_dec(row["quantity"]),
            previous_quantity=_dec(row["previous_quantity"]),
            new_quantity=_dec(row["new_quantity"]),
            reason=row["reason"],
            actor=row["actor"],
            created_at=_datetime(row, "created_at"),
        )


class SQLiteLedgerUnitOfWork(_RowMapper, ILedgerUnitOfWork):
    """All reads and writes of one mutation, on one write-locked connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def _fetch_one(self, sql: str, params: tuple) -> aiosqlite.Row | None:
        cursor = await self._conn.execute(sql, params)
        return await cursor.fetchone()

    async def get_balance(self, balance_id: int) -> StockBalance | None:
        row = await self._fetch_one(
            "SELECT * FROM stock_balances WHERE id = ?", (balance_id,)
        )
        return self._row_to_balance(row) if row else None

    async def find_lot(self, warehouse_id: int, variety_id: int) -> StockBalance | None:
        """Oldest lot of the variety in the warehouse, empty lots included."""
        row = await self._fetch_one(
            """
            SELECT * FROM stock_balances
            WHERE warehouse_id = ? AND variety_id = ?
            ORDER BY created_at, id
            LIMIT 1
            """,
            (warehouse_id, variety_id),
        )
        return self._row_to_balance(row) if row else None

    async def get_warehouse(self, warehouse_id: int) -> Warehouse | None:
        row = await self._fetch_one(
            "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
        )
        return row_to_warehouse(row) if row else None

    async def get_variety(self, variety_id: int) -> RiceVariety | None:
        row = await self._fetch_one(
            "SELECT * FROM rice_varieties WHERE id = ?", (variety_id,)
        )
        return row_to_variety(row) if row else None

    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        row = await self._fetch_one(
            "SELECT * FROM suppliers WHERE id = ?", (supplier_id,)
        )
        return row_to_supplier(row) if row else None

    async def insert_balance(self, balance: StockBalance) -> StockBalance:
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_balances (
                warehouse_id, variety_id, quantity, unit_cost, batch_label,
                expiry_date, notes, created_by, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                balance.warehouse_id,
                balance.variety_id,
                str(balance.quantity),
                str(balance.unit_cost),
                balance.batch_label,
                balance.expiry_date.isoformat() if balance.expiry_date else None,
                balance.notes,
                balance.created_by,
                balance.created_at.isoformat(),
                balance.updated_at.isoformat(),
            ),
        )
        balance.id = cursor.lastrowid
        logger.debug(
            "stock_balance_created",
            balance_id=balance.id,
            warehouse_id=balance.warehouse_id,
            variety_id=balance.variety_id,
        )
        return balance

    async def update_balance_quantity(self, balance: StockBalance) -> StockBalance:
        balance.updated_at = utc_now()
        await self._conn.execute(
            "UPDATE stock_balances SET quantity = ?, updated_at = ? WHERE id = ?",
            (str(balance.quantity), balance.updated_at.isoformat(), balance.id),
        )
        logger.debug(
            "stock_balance_updated",
            balance_id=balance.id,
            quantity=str(balance.quantity),
        )
        return balance

    async def add_purchase(self, record: PurchaseRecord) -> PurchaseRecord:
        cursor = await self._conn.execute(
            """
            INSERT INTO purchases (
                balance_id, warehouse_id, variety_id, supplier_id, invoice_number,
                purchase_date, quantity, unit_price, total, notes, actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.balance_id,
                record.warehouse_id,
                record.variety_id,
                record.supplier_id,
                record.invoice_number,
                record.purchase_date.isoformat(),
                str(record.quantity),
                str(record.unit_price),
                str(record.total),
                record.notes,
                record.actor,
                record.created_at.isoformat(),
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def add_sale(self, record: SaleRecord) -> SaleRecord:
        cursor = await self._conn.execute(
            """
            INSERT INTO sales (
                balance_id, customer_name, quantity, sale_price, cost_basis,
                total, profit_loss, sale_date, invoice_number, payment_method,
                notes, actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.balance_id,
                record.customer_name,
                str(record.quantity),
                str(record.sale_price),
                str(record.cost_basis),
                str(record.total),
                str(record.profit_loss),
                record.sale_date.isoformat(),
                record.invoice_number,
                record.payment_method,
                record.notes,
                record.actor,
                record.created_at.isoformat(),
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def add_transfer(self, record: TransferRecord) -> TransferRecord:
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_transfers (
                source_balance_id, destination_balance_id, from_warehouse_id,
                to_warehouse_id, quantity, reason, actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.source_balance_id,
                record.destination_balance_id,
                record.from_warehouse_id,
                record.to_warehouse_id,
                str(record.quantity),
                record.reason,
                record.actor,
                record.created_at.isoformat(),
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def add_adjustment(self, record: AdjustmentRecord) -> AdjustmentRecord:
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_adjustments (
                balance_id, direction, quantity, previous_quantity,
                new_quantity, reason, actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.balance_id,
                record.direction.value,
                str(record.quantity),
                str(record.previous_quantity),
                str(record.new_quantity),
                record.reason,
                record.actor,
                record.created_at.isoformat(),
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def append_entry(self, entry: LedgerEntry) -> LedgerEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO ledger_entries (
                kind, reference_id, balance_id, quantity_delta, notes, actor, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.kind.value,
                entry.reference_id,
                entry.balance_id,
                str(entry.quantity_delta),
                entry.notes,
                entry.actor,
                entry.created_at.isoformat(),
            ),
        )
        return entry.model_copy(update={"id": cursor.lastrowid})


class SQLiteLedgerStore(_RowMapper, ILedgerStore):
    """SQLite implementation of the ledger store."""

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[SQLiteLedgerUnitOfWork]:
        """
        Open a BEGIN IMMEDIATE transaction and yield a unit of work on it.

        Driver errors roll the transaction back and surface as
        StorageFailureError.
        """
        try:
            async with get_transaction(immediate=True) as conn:
                yield SQLiteLedgerUnitOfWork(conn)
        except sqlite3.Error as e:
            logger.error("ledger_unit_of_work_failed", error=str(e))
            raise StorageFailureError("ledger mutation", str(e)) from e

    async def get_balance(self, balance_id: int) -> StockBalance | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stock_balances WHERE id = ?", (balance_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_balance(row)

    async def list_balances(
        self,
        warehouse_id: int | None = None,
        variety_id: int | None = None,
        include_empty: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockBalance]:
        conditions = []
        params: list = []
        if warehouse_id is not None:
            conditions.append("warehouse_id = ?")
            params.append(warehouse_id)
        if variety_id is not None:
            conditions.append("variety_id = ?")
            params.append(variety_id)
        if not include_empty:
            conditions.append("CAST(quantity AS REAL) > 0")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_balances
                {where}
                ORDER BY created_at, id
                LIMIT ? OFFSET ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_balance(row) for row in rows]

    async def list_entries(
        self,
        kind: TransactionKind | None = None,
        balance_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 200,
    ) -> list[LedgerEntry]:
        conditions = []
        params: list = []
        if kind is not None:
            conditions.append("kind = ?")
            params.append(kind.value)
        if balance_id is not None:
            conditions.append("balance_id = ?")
            params.append(balance_id)
        if start_date is not None:
            conditions.append("created_at >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            conditions.append("created_at < ?")
            params.append((end_date + timedelta(days=1)).isoformat())

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM ledger_entries
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def ledger_quantity(
        self, balance_id: int, as_of: datetime | None = None
    ) -> Decimal:
        sql = "SELECT quantity_delta FROM ledger_entries WHERE balance_id = ?"
        params: list = [balance_id]
        if as_of is not None:
            sql += " AND created_at <= ?"
            params.append(as_of.isoformat())

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return sum((_dec(row["quantity_delta"]) for row in rows), Decimal("0"))

    async def ledger_totals(
        self, warehouse_id: int | None = None
    ) -> list[tuple[StockBalance, Decimal]]:
        """
        Every lot, optionally of one warehouse, paired with its ledger sum.

        Lots and entries are read in one transaction and see the same snapshot.
        """
        where = "WHERE b.warehouse_id = ?" if warehouse_id is not None else ""
        params = (warehouse_id,) if warehouse_id is not None else ()

        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"SELECT b.* FROM stock_balances b {where} ORDER BY b.id", params
            )
            balances = [self._row_to_balance(row) for row in await cursor.fetchall()]

            cursor = await conn.execute(
                f"""
                SELECT e.balance_id, e.quantity_delta
                FROM ledger_entries e
                JOIN stock_balances b ON b.id = e.balance_id
                {where}
                """,
                params,
            )
            sums: dict[int, Decimal] = {}
            for row in await cursor.fetchall():
                balance_id = row["balance_id"]
                sums[balance_id] = sums.get(balance_id, Decimal("0")) + _dec(row["quantity_delta"])

        return [(b, sums.get(b.id, Decimal("0"))) for b in balances]  # type: ignore[arg-type]

    async def _get_record(self, table: str, record_id: int) -> aiosqlite.Row | None:
        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,))
            return await cursor.fetchone()

    async def get_purchase(self, purchase_id: int) -> PurchaseRecord | None:
        row = await self._get_record("purchases", purchase_id)
        return self._row_to_purchase(row) if row else None

    async def get_sale(self, sale_id: int) -> SaleRecord | None:
        row = await self._get_record("sales", sale_id)
        return self._row_to_sale(row) if row else None

    async def get_transfer(self, transfer_id: int) -> TransferRecord | None:
        row = await self._get_record("stock_transfers", transfer_id)
        return self._row_to_transfer(row) if row else None

    async def get_adjustment(self, adjustment_id: int) -> AdjustmentRecord | None:
        row = await self._get_record("stock_adjustments", adjustment_id)
        return self._row_to_adjustment(row) if row else None

    async def list_sales(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        variety_id: int | None = None,
    ) -> list[SaleRecord]:
        conditions = []
        params: list = []
        if start_date is not None:
            conditions.append("s.sale_date >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            conditions.append("s.sale_date <= ?")
            params.append(end_date.isoformat())
        if variety_id is not None:
            conditions.append("b.variety_id = ?")
            params.append(variety_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT s.* FROM sales s
                JOIN stock_balances b ON b.id = s.balance_id
                {where}
                ORDER BY s.sale_date, s.id
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_sale(row) for row in rows]
