"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from artstock.core.entities.order import OrderStatus, PictureRequest
from artstock.core.entities.picture import PictureType
from artstock.core.entities.stock import ReferenceKind


class MovementRequest(BaseModel):
    """Request to receive or consume stock."""

    quantity: float = Field(..., gt=0, description="Quantity to move", examples=[50, 2.5])
    reason: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Why the stock moved",
        examples=["Supplier delivery", "Workshop use"],
    )
    reference_id: str | None = Field(
        default=None, description="ID of the entity that caused the movement"
    )
    reference_kind: ReferenceKind | None = Field(
        default=None, description="Kind of the referenced entity"
    )
    notes: str | None = Field(default=None, max_length=1000)


class AdjustRequest(BaseModel):
    """Request to set stock to an exact quantity."""

    new_quantity: float = Field(..., description="Target on-hand quantity", examples=[10])
    reason: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Why the stock was corrected",
        examples=["Stocktake"],
    )
    notes: str | None = Field(default=None, max_length=1000)


class CreateOrderRequest(BaseModel):
    """Request to create an order with its pictures."""

    customer_name: str = Field(..., min_length=1, max_length=100, examples=["Anna Petrova"])
    notes: str | None = Field(default=None, max_length=1000)
    prefix: str | None = Field(
        default=None,
        max_length=10,
        description="Order number prefix (default from settings)",
        examples=["ART"],
    )
    pictures: list[PictureRequest] = Field(..., min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    """Request to change an order's status."""

    status: OrderStatus = Field(..., examples=["IN_PROGRESS", "CANCELLED"])


class RecommendedPriceRequest(BaseModel):
    """Pricing overrides; omitted fields use the configured defaults."""

    markup_percentage: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    complexity_multiplier: float | None = None
    size_multiplier: float | None = None
    urgency_multiplier: float | None = None
    apply: bool = Field(default=False, description="Write the price to the picture")

    def overrides(self) -> dict[str, float]:
        return self.model_dump(exclude_none=True, exclude={"apply"})


class RecalculateRequest(BaseModel):
    """Bulk cost recalculation request."""

    material_id: str | None = Field(default=None, description="Only pictures using this material")
    picture_type: PictureType | None = None
    active_only: bool = True
    update_prices: bool = Field(
        default=False, description="Also move sale prices to the recommended price"
    )
    pricing: dict[str, float] | None = Field(
        default=None, description="Pricing overrides used when update_prices is set"
    )


class RebuildMaterialsRequest(BaseModel):
    """Regenerate a picture's standard materials, optionally at a new size."""

    picture_size_id: str | None = Field(
        default=None, description="New size; omit to rebuild at the current size"
    )


class PurchaseRequest(BaseModel):
    """Request to record a material purchase."""

    quantity: float = Field(..., gt=0, examples=[20])
    unit_price: float = Field(..., ge=0, examples=[4.5])
    supplier: str | None = Field(default=None, max_length=200)
    purchase_date: datetime | None = Field(
        default=None, description="Defaults to now (UTC)"
    )
