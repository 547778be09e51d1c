"""Core domain entities."""

from artstock.core.entities.costing import (
    CostBreakdown,
    CostLine,
    MarkupAdvice,
    PriceBreakdown,
    PriceGroupStats,
    PriceRecommendation,
    PricingFactors,
    PricingStats,
    RecalculationFilter,
    RecalculationItem,
    RecalculationReport,
    RecalculationStats,
    RecommendedPricingSettings,
    TypeCostStats,
)
from artstock.core.entities.material import Material, MaterialCategory, MaterialPurchase
from artstock.core.entities.order import (
    SIDE_EFFECTS,
    TRANSITIONS,
    Order,
    OrderConsumption,
    OrderCreationResult,
    OrderDetails,
    OrderStatus,
    PictureRequest,
    SideEffect,
    StatusChangeResult,
    can_transition,
    is_terminal,
)
from artstock.core.entities.picture import (
    CustomPhotoPicture,
    Picture,
    PictureMaterial,
    PictureSize,
    PictureType,
    ReadyMadePicture,
    RebuiltMaterials,
    parse_picture,
)
from artstock.core.entities.stock import (
    AdjustResult,
    AppliedMovement,
    ConsumeResult,
    LedgerStats,
    MaterialMovement,
    MovementReference,
    MovementType,
    ReceiveResult,
    Reconciliation,
    ReferenceKind,
    Stock,
)

__all__ = [
    # Material
    "Material",
    "MaterialCategory",
    "MaterialPurchase",
    # Stock ledger
    "Stock",
    "MaterialMovement",
    "MovementType",
    "MovementReference",
    "ReferenceKind",
    "ReceiveResult",
    "ConsumeResult",
    "AdjustResult",
    "AppliedMovement",
    "LedgerStats",
    "Reconciliation",
    # Picture
    "Picture",
    "PictureType",
    "PictureSize",
    "PictureMaterial",
    "ReadyMadePicture",
    "CustomPhotoPicture",
    "RebuiltMaterials",
    "parse_picture",
    # Order
    "Order",
    "OrderStatus",
    "OrderConsumption",
    "OrderCreationResult",
    "OrderDetails",
    "PictureRequest",
    "StatusChangeResult",
    "SideEffect",
    "TRANSITIONS",
    "SIDE_EFFECTS",
    "can_transition",
    "is_terminal",
    # Costing
    "CostLine",
    "CostBreakdown",
    "PricingFactors",
    "PriceBreakdown",
    "PriceRecommendation",
    "RecalculationFilter",
    "RecalculationItem",
    "RecalculationReport",
    "RecalculationStats",
    "TypeCostStats",
    "PricingStats",
    "PriceGroupStats",
    "RecommendedPricingSettings",
    "MarkupAdvice",
]
