"""Abstract interface for read-only master data."""

from abc import ABC, abstractmethod

from ricestock.core.entities.stock import RiceVariety, Supplier, Warehouse


class IMasterDataStore(ABC):
    """Read access to warehouses, varieties and suppliers.

    These records are owned by the master-data module; the ledger only
    references them.
    """

    @abstractmethod
    async def get_warehouse(self, warehouse_id: int) -> Warehouse | None:
        pass

    @abstractmethod
    async def get_variety(self, variety_id: int) -> RiceVariety | None:
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        pass
