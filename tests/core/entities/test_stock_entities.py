"""Tests for stock entities."""

from datetime import date, datetime
from decimal import Decimal

from ricestock.core.entities.stock import (
    RiceVariety,
    StockBalance,
    Supplier,
    Warehouse,
    WarehouseStatus,
)


class TestStockBalance:
    """Tests for StockBalance entity."""

    def test_defaults(self):
        balance = StockBalance(warehouse_id=1, variety_id=1, batch_label="B-001")
        assert balance.id is None
        assert balance.quantity == Decimal("0")
        assert balance.unit_cost == Decimal("0")
        assert balance.expiry_date is None
        assert isinstance(balance.created_at, datetime)
        assert balance.created_at.tzinfo is None

    def test_total_value(self):
        balance = StockBalance(
            warehouse_id=1,
            variety_id=1,
            batch_label="B-001",
            quantity=Decimal("100"),
            unit_cost=Decimal("2.50"),
        )
        assert balance.total_value == Decimal("250.00")

    def test_total_value_is_exact(self):
        balance = StockBalance(
            warehouse_id=1,
            variety_id=1,
            batch_label="B-001",
            quantity=Decimal("0.1"),
            unit_cost=Decimal("3"),
        )
        assert balance.total_value == Decimal("0.3")

    def test_is_empty(self):
        balance = StockBalance(warehouse_id=1, variety_id=1, batch_label="B-001")
        assert balance.is_empty is True
        balance.quantity = Decimal("1")
        assert balance.is_empty is False

    def test_decimal_coercion_from_string(self):
        balance = StockBalance(
            warehouse_id=1,
            variety_id=1,
            batch_label="B-001",
            quantity="12.345",
            expiry_date="2027-01-31",
        )
        assert balance.quantity == Decimal("12.345")
        assert balance.expiry_date == date(2027, 1, 31)


class TestMasterRecords:
    def test_warehouse_defaults_active(self):
        warehouse = Warehouse(name="Main", capacity=Decimal("1000"))
        assert warehouse.status == WarehouseStatus.ACTIVE

    def test_variety_default_minimum(self):
        assert RiceVariety(name="Basmati").minimum_stock_level == Decimal("0")

    def test_supplier(self):
        supplier = Supplier(id=1, name="Delta Mills", phone="0170")
        assert supplier.contact_person is None
