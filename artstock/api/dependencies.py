"""
Dependency injection for FastAPI.

Route handlers depend on these functions; tests swap them out through
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from artstock.application.services import ServiceContainer, get_services
from artstock.config import Settings, get_settings
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


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


async def get_container() -> ServiceContainer:
    """Get the wired service container."""
    return await get_services()


# Service dependencies
def get_ledger(container: ServiceContainer = Depends(get_container)) -> StockLedger:
    return container.ledger


def get_numbering(container: ServiceContainer = Depends(get_container)) -> OrderNumberingService:
    return container.numbering


def get_intake(container: ServiceContainer = Depends(get_container)) -> OrderIntakeService:
    return container.intake


def get_state_machine(container: ServiceContainer = Depends(get_container)) -> OrderStateMachine:
    return container.state_machine


def get_costing(container: ServiceContainer = Depends(get_container)) -> CostCalculationService:
    return container.costing


def get_pricing(container: ServiceContainer = Depends(get_container)) -> PricingService:
    return container.pricing


def get_purchasing(container: ServiceContainer = Depends(get_container)) -> PurchasingService:
    return container.purchasing


def get_bom(container: ServiceContainer = Depends(get_container)) -> BillOfMaterialsService:
    return container.bom
