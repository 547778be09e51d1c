"""
Core business logic services.

Layer-pure services that depend only on:
- artstock/core/entities/*
- artstock/core/interfaces/*
- artstock/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from artstock.core.services.bill_of_materials import BillOfMaterialsService
from artstock.core.services.cost_calculation import CostCalculationService
from artstock.core.services.order_intake import OrderIntakeService
from artstock.core.services.order_numbering import OrderNumberingService
from artstock.core.services.order_state_machine import OrderStateMachine
from artstock.core.services.pricing import PricingService, parse_factors, price_breakdown
from artstock.core.services.purchasing import PurchaseResult, PurchasingService
from artstock.core.services.stock_ledger import StockLedger

__all__ = [
    # Ledger
    "StockLedger",
    # Orders
    "OrderNumberingService",
    "OrderStateMachine",
    "OrderIntakeService",
    # Bill of materials
    "BillOfMaterialsService",
    # Costing and pricing
    "CostCalculationService",
    "PricingService",
    "parse_factors",
    "price_breakdown",
    # Purchasing
    "PurchasingService",
    "PurchaseResult",
]
