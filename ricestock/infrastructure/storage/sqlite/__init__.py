"""SQLite storage implementations."""

from ricestock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from ricestock.infrastructure.storage.sqlite.ledger_store import (
    SQLiteLedgerStore,
    SQLiteLedgerUnitOfWork,
)
from ricestock.infrastructure.storage.sqlite.master_data_store import SQLiteMasterDataStore

# Singleton instances
_ledger_store: SQLiteLedgerStore | None = None
_master_data_store: SQLiteMasterDataStore | None = None


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_master_data_store() -> SQLiteMasterDataStore:
    """Get singleton master data store instance."""
    global _master_data_store
    if _master_data_store is None:
        _master_data_store = SQLiteMasterDataStore()
    return _master_data_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteLedgerStore",
    "SQLiteLedgerUnitOfWork",
    "SQLiteMasterDataStore",
    # Factory functions
    "get_ledger_store",
    "get_master_data_store",
]
