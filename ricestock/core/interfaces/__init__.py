"""Abstract interfaces implemented by the infrastructure layer."""

from ricestock.core.interfaces.ledger_store import ILedgerStore, ILedgerUnitOfWork
from ricestock.core.interfaces.master_data_store import IMasterDataStore

__all__ = [
    "ILedgerStore",
    "ILedgerUnitOfWork",
    "IMasterDataStore",
]
