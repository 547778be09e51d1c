"""SQLite storage implementations."""

from artstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from artstock.infrastructure.storage.sqlite.fulfillment_store import SQLiteFulfillmentStore
from artstock.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore
from artstock.infrastructure.storage.sqlite.order_store import SQLiteOrderStore
from artstock.infrastructure.storage.sqlite.picture_store import SQLitePictureStore
from artstock.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from artstock.infrastructure.storage.sqlite.stock_ledger_store import SQLiteStockLedgerStore

__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Store classes
    "SQLiteFulfillmentStore",
    "SQLiteMaterialStore",
    "SQLiteOrderStore",
    "SQLitePictureStore",
    "SQLitePurchaseStore",
    "SQLiteStockLedgerStore",
]
