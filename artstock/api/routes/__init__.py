"""API route modules."""

from artstock.api.routes.health import router as health_router
from artstock.api.routes.orders import router as orders_router
from artstock.api.routes.pictures import router as pictures_router
from artstock.api.routes.stock import router as stock_router

__all__ = [
    "health_router",
    "stock_router",
    "orders_router",
    "pictures_router",
]
