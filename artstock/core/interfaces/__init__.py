"""Core interfaces (ports) for dependency injection."""

from artstock.core.interfaces.fulfillment_store import IFulfillmentStore
from artstock.core.interfaces.material_store import IMaterialStore
from artstock.core.interfaces.order_store import IOrderStore
from artstock.core.interfaces.picture_store import AnyPicture, IPictureStore
from artstock.core.interfaces.purchase_store import IPurchaseStore
from artstock.core.interfaces.stock_store import IStockLedgerStore

__all__ = [
    "AnyPicture",
    "IFulfillmentStore",
    "IMaterialStore",
    "IOrderStore",
    "IPictureStore",
    "IPurchaseStore",
    "IStockLedgerStore",
]
