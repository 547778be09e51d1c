"""
Order domain entities and the fulfillment transition table.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from artstock.core.entities.picture import CustomPhotoPicture, PictureType, ReadyMadePicture
from artstock.core.exceptions import CascadeWarning


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class SideEffect(str, Enum):
    """Stock side effect attached to entering a status."""

    NONE = "none"
    CONSUME = "consume"
    RETURN = "return"


# Forward moves may skip states; CANCELLED is reachable from any non-terminal state.
TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.IN_PROGRESS,
            OrderStatus.COMPLETED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.IN_PROGRESS: frozenset(
        {OrderStatus.COMPLETED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.COMPLETED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

SIDE_EFFECTS: dict[OrderStatus, SideEffect] = {
    OrderStatus.PENDING: SideEffect.NONE,
    OrderStatus.IN_PROGRESS: SideEffect.CONSUME,
    OrderStatus.COMPLETED: SideEffect.CONSUME,
    OrderStatus.DELIVERED: SideEffect.CONSUME,
    OrderStatus.CANCELLED: SideEffect.RETURN,
}


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """Re-entering the current status counts as a retry and is allowed."""
    return requested == current or requested in TRANSITIONS[current]


class Order(BaseModel):
    """A customer order owning zero or more pictures."""

    id: str | None = None
    order_number: str
    customer_name: str
    status: OrderStatus = OrderStatus.PENDING
    notes: str | None = None
    total_price: float = 0.0
    materials_consumed_at: datetime | None = None
    materials_returned_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OrderConsumption(BaseModel):
    """What was actually taken from stock for one picture of an order."""

    id: int | None = None
    order_id: str
    picture_id: str | None
    material_id: str
    quantity: float
    movement_id: int | None = None
    consumed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    returned_at: datetime | None = None
    return_movement_id: int | None = None


@dataclass
class StatusChangeResult:
    """Persisted order plus non-fatal side-effect warnings."""

    order: Order
    previous_status: OrderStatus
    warnings: list[CascadeWarning] = field(default_factory=list)
    consumed_pictures: list[str] = field(default_factory=list)
    returned_pictures: list[str] = field(default_factory=list)


@dataclass
class OrderCreationResult:
    """Created order, its pictures, and warnings from BOM materialization."""

    order: Order
    pictures: list[ReadyMadePicture | CustomPhotoPicture] = field(default_factory=list)
    warnings: list[CascadeWarning] = field(default_factory=list)


class PictureRequest(BaseModel):
    """
    One picture requested with a new order.

    READY_MADE with ``catalog_picture_id`` copies that catalog piece and its
    bill of materials. Otherwise ``name`` and ``picture_size_id`` are required,
    and CUSTOM_PHOTO also needs the customer's ``photo_url``.
    """

    type: PictureType
    catalog_picture_id: str | None = None
    name: str | None = None
    picture_size_id: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    work_hours: float | None = Field(default=None, ge=0)
    photo_url: str | None = None

    @model_validator(mode="after")
    def check_source(self) -> "PictureRequest":
        if self.catalog_picture_id is not None:
            if self.type is not PictureType.READY_MADE:
                raise ValueError("only READY_MADE pictures can be copied from the catalog")
            return self
        if not self.name or not self.picture_size_id:
            raise ValueError("name and picture_size_id are required")
        if self.type is PictureType.CUSTOM_PHOTO and not self.photo_url:
            raise ValueError("photo_url is required for CUSTOM_PHOTO pictures")
        return self


@dataclass
class OrderDetails:
    """An order with its pictures and consumption records."""

    order: Order
    pictures: list[ReadyMadePicture | CustomPhotoPicture] = field(default_factory=list)
    consumptions: list[OrderConsumption] = field(default_factory=list)
