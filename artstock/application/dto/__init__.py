"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from artstock.application.dto.requests import (
    AdjustRequest,
    CreateOrderRequest,
    MovementRequest,
    PurchaseRequest,
    RebuildMaterialsRequest,
    RecalculateRequest,
    RecommendedPriceRequest,
    UpdateOrderStatusRequest,
)
from artstock.application.dto.responses import (
    AdjustResponse,
    CascadeWarningResponse,
    ConsumeResponse,
    ConsumptionResponse,
    ErrorResponse,
    HealthResponse,
    MaterialLineResponse,
    MovementListResponse,
    MovementResponse,
    NextNumberResponse,
    OrderCreatedResponse,
    OrderDetailResponse,
    OrderResponse,
    PictureResponse,
    ProviderHealthResponse,
    PurchaseResponse,
    RebuildMaterialsResponse,
    ReceiveResponse,
    ReconciliationResponse,
    StatusChangeResponse,
    StockResponse,
)

__all__ = [
    # Requests
    "MovementRequest",
    "AdjustRequest",
    "CreateOrderRequest",
    "UpdateOrderStatusRequest",
    "RecommendedPriceRequest",
    "RecalculateRequest",
    "PurchaseRequest",
    "RebuildMaterialsRequest",
    # Responses
    "MovementResponse",
    "MovementListResponse",
    "StockResponse",
    "ReceiveResponse",
    "ConsumeResponse",
    "AdjustResponse",
    "ReconciliationResponse",
    "CascadeWarningResponse",
    "OrderResponse",
    "PictureResponse",
    "ConsumptionResponse",
    "OrderDetailResponse",
    "OrderCreatedResponse",
    "MaterialLineResponse",
    "RebuildMaterialsResponse",
    "StatusChangeResponse",
    "PurchaseResponse",
    "NextNumberResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
