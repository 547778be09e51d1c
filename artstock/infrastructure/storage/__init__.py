"""Storage infrastructure implementations."""

from artstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteFulfillmentStore,
    SQLiteMaterialStore,
    SQLiteOrderStore,
    SQLitePictureStore,
    SQLitePurchaseStore,
    SQLiteStockLedgerStore,
    close_pool,
    get_pool,
)

__all__ = [
    "ConnectionPool",
    "SQLiteFulfillmentStore",
    "SQLiteMaterialStore",
    "SQLiteOrderStore",
    "SQLitePictureStore",
    "SQLitePurchaseStore",
    "SQLiteStockLedgerStore",
    "close_pool",
    "get_pool",
]
