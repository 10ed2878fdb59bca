"""Unit tests for domain exceptions."""

from decimal import Decimal

import pytest

from ricestock.core.exceptions import (
    ConfigurationError,
    CorruptRecordError,
    InsufficientStockError,
    InvalidInputError,
    MigrationError,
    MissingActorError,
    NotFoundError,
    RecordNotFoundError,
    RiceStockError,
    StockBalanceNotFoundError,
    StorageError,
    StorageFailureError,
    SupplierNotFoundError,
    ValidationError,
    VarietyNotFoundError,
    WarehouseNotFoundError,
)


class TestRiceStockError:
    """Tests for base RiceStockError exception."""

    def test_basic_initialization(self):
        error = RiceStockError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "RiceStockError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = RiceStockError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = RiceStockError("Test error", code="TEST_CODE", details={"extra": "info"})
        assert error.to_dict() == {
            "error": "TEST_CODE",
            "message": "Test error",
            "details": {"extra": "info"},
        }


class TestInvalidInputError:
    def test_code_and_field(self):
        error = InvalidInputError("quantity", "must be greater than 0", Decimal("-5"))
        assert error.code == "INVALID_INPUT"
        assert error.details["field"] == "quantity"
        assert error.details["value"] == "-5"
        assert "quantity" in error.message

    def test_is_validation_error(self):
        assert isinstance(InvalidInputError("f", "m"), ValidationError)

    def test_plain_validation_error_code(self):
        assert ValidationError("f", "m").code == "VALIDATION_ERROR"

    def test_long_value_truncated(self):
        error = InvalidInputError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100


class TestMissingActorError:
    def test_code(self):
        error = MissingActorError()
        assert error.code == "MISSING_ACTOR"
        assert error.details["field"] == "actor"
        assert isinstance(error, ValidationError)


class TestInsufficientStockError:
    def test_details(self):
        error = InsufficientStockError(balance_id=7, requested=Decimal("50"), available=Decimal("10"))
        assert error.code == "INSUFFICIENT_STOCK"
        assert error.details == {"balance_id": 7, "requested": "50", "available": "10"}
        assert "lot 7" in error.message


class TestNotFoundErrors:
    @pytest.mark.parametrize(
        "exc_class,code",
        [
            (StockBalanceNotFoundError, "STOCK_BALANCE_NOT_FOUND"),
            (WarehouseNotFoundError, "WAREHOUSE_NOT_FOUND"),
            (VarietyNotFoundError, "VARIETY_NOT_FOUND"),
            (SupplierNotFoundError, "SUPPLIER_NOT_FOUND"),
        ],
    )
    def test_codes(self, exc_class, code):
        error = exc_class(42)
        assert error.code == code
        assert error.details == {"id": 42}
        assert isinstance(error, NotFoundError)

    def test_message_names_entity(self):
        assert WarehouseNotFoundError(3).message == "Warehouse not found: 3"

    def test_record_not_found(self):
        error = RecordNotFoundError("sale", 9)
        assert error.code == "RECORD_NOT_FOUND"
        assert error.details == {"kind": "sale", "id": 9}
        assert isinstance(error, NotFoundError)


class TestStorageErrors:
    def test_storage_failure(self):
        error = StorageFailureError("ledger mutation", "disk I/O error")
        assert error.code == "STORAGE_FAILURE"
        assert error.details["operation"] == "ledger mutation"
        assert isinstance(error, StorageError)

    def test_corrupt_record(self):
        error = CorruptRecordError("sale_date", "06/01/2026")
        assert error.code == "CORRUPT_RECORD"
        assert error.message == "Stored sale_date is not readable: '06/01/2026'"
        assert isinstance(error, StorageError)

    def test_migration_error(self):
        error = MigrationError("002", "no such table: lots")
        assert error.code == "MIGRATION_FAILED"
        assert error.message == "Migration v002 failed: no such table: lots"
        assert error.details == {"version": "002", "error": "no such table: lots"}
        assert isinstance(error, StorageError)

    def test_configuration_error_default_code(self):
        assert ConfigurationError("bad").code == "ConfigurationError"


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self):
        for error in [
            InvalidInputError("f", "m"),
            InsufficientStockError(1, Decimal("2"), Decimal("1")),
            StockBalanceNotFoundError(1),
            StorageFailureError("op", "err"),
        ]:
            assert isinstance(error, RiceStockError)

    def test_can_catch_by_base(self):
        with pytest.raises(RiceStockError):
            raise InsufficientStockError(1, Decimal("2"), Decimal("1"))
