"""
Domain exceptions for the rice stock ledger.

Every failure a mutation can report is one of four kinds: invalid input,
insufficient stock, a missing record, or a storage failure.
"""

from decimal import Decimal
from typing import Any


class RiceStockError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(RiceStockError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidInputError(ValidationError):
    """Request is malformed or logically impossible. Raised before any write."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(field, message, value)
        self.code = "INVALID_INPUT"


class MissingActorError(ValidationError):
    """A mutation arrived without the identity of the user performing it."""

    def __init__(self):
        super().__init__("actor", "the acting user is required for every stock mutation")
        self.code = "MISSING_ACTOR"


# Stock Exceptions
class InsufficientStockError(RiceStockError):
    """Requested decrement exceeds the quantity held by the lot."""

    def __init__(self, balance_id: int, requested: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient stock in lot {balance_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "balance_id": balance_id,
                "requested": str(requested),
                "available": str(available),
            },
        )


# Lookup Exceptions
class NotFoundError(RiceStockError):
    """Referenced record does not exist."""

    entity = "record"

    def __init__(self, entity_id: int):
        super().__init__(
            f"{self.entity.capitalize()} not found: {entity_id}",
            code=f"{self.entity.upper().replace(' ', '_')}_NOT_FOUND",
            details={"id": entity_id},
        )


class StockBalanceNotFoundError(NotFoundError):
    """Stock balance (lot) not found."""

    entity = "stock balance"


class WarehouseNotFoundError(NotFoundError):
    """Warehouse not found."""

    entity = "warehouse"


class VarietyNotFoundError(NotFoundError):
    """Rice variety not found."""

    entity = "variety"


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""

    entity = "supplier"


class RecordNotFoundError(NotFoundError):
    """Business event record (purchase, sale, transfer, adjustment) not found."""

    def __init__(self, kind: str, record_id: int):
        RiceStockError.__init__(
            self,
            f"{kind.capitalize()} record not found: {record_id}",
            code="RECORD_NOT_FOUND",
            details={"kind": kind, "id": record_id},
        )


# Storage Exceptions
class StorageError(RiceStockError):
    """Base exception for storage operations."""

    pass


class StorageFailureError(StorageError):
    """Persistence failed inside a unit of work; the whole mutation was rolled back."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Storage failure during {operation}: {error}",
            code="STORAGE_FAILURE",
            details={"operation": operation, "error": error},
        )


class CorruptRecordError(StorageError):
    """A stored value cannot be read back into its entity field."""

    def __init__(self, column: str, value: Any):
        super().__init__(
            f"Stored {column} is not readable: {value!r}",
            code="CORRUPT_RECORD",
            details={"column": column, "value": value},
        )


class MigrationError(StorageError):
    """A schema migration could not be applied; the database was left at its previous version."""

    def __init__(self, version: str, error: str):
        super().__init__(
            f"Migration v{version} failed: {error}",
            code="MIGRATION_FAILED",
            details={"version": version, "error": error},
        )


class ConfigurationError(RiceStockError):
    """Configuration error."""

    pass
