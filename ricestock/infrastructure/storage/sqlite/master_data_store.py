"""SQLite implementation of read-only master data access."""

from decimal import Decimal

import aiosqlite

from ricestock.core.entities.stock import (
    RiceVariety,
    Supplier,
    Warehouse,
    WarehouseStatus,
)
from ricestock.core.interfaces.master_data_store import IMasterDataStore
from ricestock.infrastructure.storage.sqlite.connection import get_connection


def row_to_warehouse(row: aiosqlite.Row) -> Warehouse:
    """Convert a database row to a Warehouse entity."""
    return Warehouse(
        id=row["id"],
        name=row["name"],
        location=row["location"],
        capacity=Decimal(str(row["capacity"])),
        manager_name=row["manager_name"],
        status=WarehouseStatus(row["status"]),
    )


def row_to_variety(row: aiosqlite.Row) -> RiceVariety:
    """Convert a database row to a RiceVariety entity."""
    return RiceVariety(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        minimum_stock_level=Decimal(str(row["minimum_stock_level"] or "0")),
        description=row["description"],
    )


def row_to_supplier(row: aiosqlite.Row) -> Supplier:
    """Convert a database row to a Supplier entity."""
    return Supplier(
        id=row["id"],
        name=row["name"],
        contact_person=row["contact_person"],
        phone=row["phone"],
    )


class SQLiteMasterDataStore(IMasterDataStore):
    """Reads warehouses, varieties and suppliers. The ledger never writes them."""

    async def get_warehouse(self, warehouse_id: int) -> Warehouse | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM warehouses WHERE id = ?", (warehouse_id,)
            )
            row = await cursor.fetchone()
            return row_to_warehouse(row) if row else None

    async def get_variety(self, variety_id: int) -> RiceVariety | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM rice_varieties WHERE id = ?", (variety_id,)
            )
            row = await cursor.fetchone()
            return row_to_variety(row) if row else None

    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM suppliers WHERE id = ?", (supplier_id,)
            )
            row = await cursor.fetchone()
            return row_to_supplier(row) if row else None
