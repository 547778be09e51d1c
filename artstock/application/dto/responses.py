"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from artstock.core.entities.order import (
    Order,
    OrderConsumption,
    OrderCreationResult,
    OrderDetails,
    StatusChangeResult,
)
from artstock.core.entities.picture import ReadyMadePicture
from artstock.core.entities.stock import MaterialMovement, Reconciliation, Stock
from artstock.core.exceptions import CascadeWarning
from artstock.core.interfaces.picture_store import AnyPicture


class MovementResponse(BaseModel):
    """Stock movement in responses."""

    id: int
    material_id: str
    movement_type: str
    quantity: float = Field(..., description="Non-negative magnitude")
    delta: float = Field(..., description="Signed effect on stock")
    reason: str
    reference_id: str | None = None
    reference_kind: str | None = None
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: MaterialMovement) -> "MovementResponse":
        return cls(
            id=movement.id,
            material_id=movement.material_id,
            movement_type=movement.movement_type.value,
            quantity=movement.quantity,
            delta=movement.delta,
            reason=movement.reason,
            reference_id=movement.reference.entity_id if movement.reference else None,
            reference_kind=movement.reference.kind.value if movement.reference else None,
            notes=movement.notes,
            created_at=movement.created_at,
        )


class MovementListResponse(BaseModel):
    """Paginated movement list."""

    items: list[MovementResponse]
    limit: int
    offset: int


class StockResponse(BaseModel):
    """Current stock of a material."""

    material_id: str
    quantity: float
    min_level: float | None = None
    is_low: bool = False
    updated_at: datetime

    @classmethod
    def from_entity(cls, stock: Stock) -> "StockResponse":
        return cls(
            material_id=stock.material_id,
            quantity=stock.quantity,
            min_level=stock.min_level,
            is_low=stock.is_low,
            updated_at=stock.updated_at,
        )


class ReceiveResponse(BaseModel):
    """Result of receiving stock."""

    new_quantity: float
    movement: MovementResponse


class ConsumeResponse(BaseModel):
    """Result of consuming stock."""

    new_quantity: float
    went_negative: bool
    movement: MovementResponse


class AdjustResponse(BaseModel):
    """Result of adjusting stock."""

    old_quantity: float
    new_quantity: float
    delta: float
    movement: MovementResponse


class ReconciliationResponse(BaseModel):
    """Stock versus movement-sum comparison."""

    material_id: str
    stock_quantity: float
    ledger_quantity: float
    movement_count: int
    balanced: bool

    @classmethod
    def from_entity(cls, result: Reconciliation) -> "ReconciliationResponse":
        return cls(**result.model_dump(), balanced=result.balanced)


class CascadeWarningResponse(BaseModel):
    """Non-fatal side-effect failure."""

    operation: str
    message: str
    order_id: str | None = None
    picture_id: str | None = None
    material_id: str | None = None
    quantity: float | None = None

    @classmethod
    def from_warning(cls, warning: CascadeWarning) -> "CascadeWarningResponse":
        return cls(
            operation=warning.operation,
            message=warning.message,
            order_id=warning.order_id,
            picture_id=warning.picture_id,
            material_id=warning.material_id,
            quantity=warning.quantity,
        )


class OrderResponse(BaseModel):
    """Order in responses."""

    id: str
    order_number: str
    customer_name: str
    status: str
    notes: str | None = None
    total_price: float
    materials_consumed_at: datetime | None = None
    materials_returned_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        data = order.model_dump()
        data["status"] = order.status.value
        return cls(**data)


class PictureResponse(BaseModel):
    """Picture in responses (either variant)."""

    id: str
    type: str
    name: str
    picture_size_id: str
    order_id: str | None = None
    description: str | None = None
    price: float
    cost_price: float | None = None
    work_hours: float
    is_active: bool
    source_picture_id: str | None = None
    image_url: str | None = None
    photo_url: str | None = None

    @classmethod
    def from_entity(cls, picture: AnyPicture) -> "PictureResponse":
        extra = (
            {"source_picture_id": picture.source_picture_id, "image_url": picture.image_url}
            if isinstance(picture, ReadyMadePicture)
            else {"photo_url": picture.photo_url}
        )
        return cls(
            id=picture.id,
            type=picture.type.value,
            name=picture.name,
            picture_size_id=picture.picture_size_id,
            order_id=picture.order_id,
            description=picture.description,
            price=picture.price,
            cost_price=picture.cost_price,
            work_hours=picture.work_hours,
            is_active=picture.is_active,
            **extra,
        )


class ConsumptionResponse(BaseModel):
    """Order consumption record."""

    id: int
    picture_id: str | None = None
    material_id: str
    quantity: float
    consumed_at: datetime
    returned_at: datetime | None = None

    @classmethod
    def from_entity(cls, record: OrderConsumption) -> "ConsumptionResponse":
        return cls(
            id=record.id,
            picture_id=record.picture_id,
            material_id=record.material_id,
            quantity=record.quantity,
            consumed_at=record.consumed_at,
            returned_at=record.returned_at,
        )


class OrderDetailResponse(BaseModel):
    """Order with pictures and consumption records."""

    order: OrderResponse
    pictures: list[PictureResponse] = Field(default_factory=list)
    consumptions: list[ConsumptionResponse] = Field(default_factory=list)

    @classmethod
    def from_details(cls, details: OrderDetails) -> "OrderDetailResponse":
        return cls(
            order=OrderResponse.from_entity(details.order),
            pictures=[PictureResponse.from_entity(p) for p in details.pictures],
            consumptions=[ConsumptionResponse.from_entity(c) for c in details.consumptions],
        )


class OrderCreatedResponse(BaseModel):
    """Result of order intake."""

    order: OrderResponse
    pictures: list[PictureResponse] = Field(default_factory=list)
    warnings: list[CascadeWarningResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: OrderCreationResult) -> "OrderCreatedResponse":
        return cls(
            order=OrderResponse.from_entity(result.order),
            pictures=[PictureResponse.from_entity(p) for p in result.pictures],
            warnings=[CascadeWarningResponse.from_warning(w) for w in result.warnings],
        )


class StatusChangeResponse(BaseModel):
    """Result of a status transition."""

    order: OrderResponse
    previous_status: str
    consumed_pictures: list[str] = Field(default_factory=list)
    returned_pictures: list[str] = Field(default_factory=list)
    warnings: list[CascadeWarningResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: StatusChangeResult) -> "StatusChangeResponse":
        return cls(
            order=OrderResponse.from_entity(result.order),
            previous_status=result.previous_status.value,
            consumed_pictures=result.consumed_pictures,
            returned_pictures=result.returned_pictures,
            warnings=[CascadeWarningResponse.from_warning(w) for w in result.warnings],
        )


class MaterialLineResponse(BaseModel):
    """Bill-of-materials line."""

    material_id: str
    quantity: float


class RebuildMaterialsResponse(BaseModel):
    """Regenerated bill of materials and the resulting cost price."""

    picture_id: str
    picture_size_id: str
    lines: list[MaterialLineResponse] = Field(default_factory=list)
    cost_price: float


class PurchaseResponse(BaseModel):
    """Recorded purchase with its stock effect."""

    id: int
    material_id: str
    quantity: float
    unit_price: float
    total_price: float
    supplier: str | None = None
    purchase_date: datetime
    new_quantity: float
    movement: MovementResponse
    recalculated_pictures: int | None = None


class NextNumberResponse(BaseModel):
    """Reserved order number."""

    order_number: str


class ProviderHealthResponse(BaseModel):
    """Health status of a backing resource."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MATERIAL_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
