"""
Service factory functions for dependency injection.

This module wires the SQLite stores to the core services. Every store shares
one connection pool, handed in explicitly, so tests can build a fully wired
set of services over a temporary database.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from dataclasses import dataclass

from artstock.config import Settings, get_logger, get_settings
from artstock.core.entities.costing import PricingFactors
from artstock.core.services import (
    BillOfMaterialsService,
    CostCalculationService,
    OrderIntakeService,
    OrderNumberingService,
    OrderStateMachine,
    PricingService,
    PurchasingService,
    StockLedger,
)
from artstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteFulfillmentStore,
    SQLiteMaterialStore,
    SQLiteOrderStore,
    SQLitePictureStore,
    SQLitePurchaseStore,
    SQLiteStockLedgerStore,
    get_pool,
)

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Fully wired stores and services sharing one connection pool."""

    pool: ConnectionPool
    material_store: SQLiteMaterialStore
    ledger_store: SQLiteStockLedgerStore
    picture_store: SQLitePictureStore
    order_store: SQLiteOrderStore
    fulfillment_store: SQLiteFulfillmentStore
    purchase_store: SQLitePurchaseStore
    ledger: StockLedger
    numbering: OrderNumberingService
    bom: BillOfMaterialsService
    state_machine: OrderStateMachine
    intake: OrderIntakeService
    costing: CostCalculationService
    pricing: PricingService
    purchasing: PurchasingService


def build_services(pool: ConnectionPool, settings: Settings | None = None) -> ServiceContainer:
    """
    Wire every store and service over ``pool``.

    Args:
        pool: Connection pool shared by all stores
        settings: Optional settings override (default: global settings)

    Returns:
        Configured ServiceContainer
    """
    settings = settings or get_settings()

    material_store = SQLiteMaterialStore(pool)
    ledger_store = SQLiteStockLedgerStore(pool)
    picture_store = SQLitePictureStore(pool)
    order_store = SQLiteOrderStore(pool)
    fulfillment_store = SQLiteFulfillmentStore(pool)
    purchase_store = SQLitePurchaseStore(pool)

    ledger = StockLedger(
        ledger_store,
        material_store,
        stats_window_days=settings.ledger.stats_window_days,
    )
    numbering = OrderNumberingService(
        order_store, default_prefix=settings.numbering.default_prefix
    )
    bom = BillOfMaterialsService(picture_store, material_store)
    state_machine = OrderStateMachine(order_store, picture_store, fulfillment_store, bom)
    intake = OrderIntakeService(
        order_store,
        picture_store,
        fulfillment_store,
        numbering,
        bom,
        max_retries=settings.numbering.max_retries,
    )
    costing = CostCalculationService(
        picture_store,
        purchase_store,
        purchase_window=settings.costing.purchase_window,
        hourly_rate=settings.costing.hourly_rate,
    )
    pricing = PricingService(
        costing,
        picture_store,
        defaults=PricingFactors(**settings.pricing.model_dump()),
    )
    purchasing = PurchasingService(
        purchase_store,
        costing,
        recalculate_on_purchase=settings.costing.recalculate_on_purchase,
    )

    return ServiceContainer(
        pool=pool,
        material_store=material_store,
        ledger_store=ledger_store,
        picture_store=picture_store,
        order_store=order_store,
        fulfillment_store=fulfillment_store,
        purchase_store=purchase_store,
        ledger=ledger,
        numbering=numbering,
        bom=bom,
        state_machine=state_machine,
        intake=intake,
        costing=costing,
        pricing=pricing,
        purchasing=purchasing,
    )


# Singleton container for the running application
_services: ServiceContainer | None = None


async def get_services() -> ServiceContainer:
    """Get or create the application service container."""
    global _services
    if _services is None:
        pool = await get_pool()
        _services = build_services(pool)
        logger.info("services_initialized")
    return _services


def reset_services() -> None:
    """Reset the service container (for testing)."""
    global _services
    _services = None
