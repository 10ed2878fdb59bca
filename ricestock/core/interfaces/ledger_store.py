"""Abstract interfaces for lot balances, the transaction ledger and event records."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date, datetime
from decimal import Decimal

from ricestock.core.entities.ledger import (
    AdjustmentRecord,
    LedgerEntry,
    PurchaseRecord,
    SaleRecord,
    TransactionKind,
    TransferRecord,
)
from ricestock.core.entities.stock import RiceVariety, StockBalance, Supplier, Warehouse


class ILedgerUnitOfWork(ABC):
    """
    Reads and writes of one mutation, committed or rolled back together.

    Reads made through the unit of work see the database under the
    mutation's write lock, so they stay valid until commit.
    """

    @abstractmethod
    async def get_balance(self, balance_id: int) -> StockBalance | None:
        """Get a lot by ID."""
        pass

    @abstractmethod
    async def find_lot(self, warehouse_id: int, variety_id: int) -> StockBalance | None:
        """Get the oldest lot of a variety held in a warehouse."""
        pass

    @abstractmethod
    async def get_warehouse(self, warehouse_id: int) -> Warehouse | None:
        pass

    @abstractmethod
    async def get_variety(self, variety_id: int) -> RiceVariety | None:
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        pass

    @abstractmethod
    async def insert_balance(self, balance: StockBalance) -> StockBalance:
        """Open a new lot."""
        pass

    @abstractmethod
    async def update_balance_quantity(self, balance: StockBalance) -> StockBalance:
        """Persist a lot's new quantity and last-updated timestamp."""
        pass

    @abstractmethod
    async def add_purchase(self, record: PurchaseRecord) -> PurchaseRecord:
        pass

    @abstractmethod
    async def add_sale(self, record: SaleRecord) -> SaleRecord:
        pass

    @abstractmethod
    async def add_transfer(self, record: TransferRecord) -> TransferRecord:
        pass

    @abstractmethod
    async def add_adjustment(self, record: AdjustmentRecord) -> AdjustmentRecord:
        pass

    @abstractmethod
    async def append_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Append a ledger entry. Entries are never updated or deleted."""
        pass


class ILedgerStore(ABC):
    """Interface for ledger persistence: the mutation unit of work and the read surface."""

    @abstractmethod
    def unit_of_work(self) -> AbstractAsyncContextManager[ILedgerUnitOfWork]:
        """
        Open an atomic, write-locked unit of work.

        Commits when the block exits normally, rolls back on any exception.
        """
        pass

    @abstractmethod
    async def get_balance(self, balance_id: int) -> StockBalance | None:
        """Get a lot by ID."""
        pass

    @abstractmethod
    async def list_balances(
        self,
        warehouse_id: int | None = None,
        variety_id: int | None = None,
        include_empty: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockBalance]:
        """List lots, optionally filtered by warehouse and variety."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        kind: TransactionKind | None = None,
        balance_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 200,
    ) -> list[LedgerEntry]:
        """List ledger entries, newest first."""
        pass

    @abstractmethod
    async def ledger_quantity(
        self, balance_id: int, as_of: datetime | None = None
    ) -> Decimal:
        """Sum of a lot's ledger deltas recorded up to as_of (inclusive)."""
        pass

    @abstractmethod
    async def ledger_totals(
        self, warehouse_id: int | None = None
    ) -> list[tuple[StockBalance, Decimal]]:
        """Every lot with the sum of its ledger deltas, read from one snapshot."""
        pass

    @abstractmethod
    async def get_purchase(self, purchase_id: int) -> PurchaseRecord | None:
        pass

    @abstractmethod
    async def get_sale(self, sale_id: int) -> SaleRecord | None:
        pass

    @abstractmethod
    async def get_transfer(self, transfer_id: int) -> TransferRecord | None:
        pass

    @abstractmethod
    async def get_adjustment(self, adjustment_id: int) -> AdjustmentRecord | None:
        pass

    @abstractmethod
    async def list_sales(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        variety_id: int | None = None,
    ) -> list[SaleRecord]:
        """List sales dated within the range, optionally for one variety."""
        pass
