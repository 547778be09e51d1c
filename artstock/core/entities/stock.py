"""Stock ledger domain entities."""

import math
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class ReferenceKind(str, Enum):
    """Kind of entity a movement points back to."""

    ORDER = "ORDER"
    PURCHASE = "PURCHASE"
    PICTURE = "PICTURE"
    MANUAL = "MANUAL"


class MovementReference(BaseModel):
    """Optional back-reference from a movement to the entity that caused it."""

    entity_id: str
    kind: ReferenceKind


class Stock(BaseModel):
    """Current on-hand quantity for one material. May be negative (backorder)."""

    id: int | None = None
    material_id: str
    quantity: float = 0.0
    min_level: float | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_low(self) -> bool:
        return self.min_level is not None and self.quantity <= self.min_level


class MaterialMovement(BaseModel):
    """
    Immutable ledger entry.

    ``quantity`` is always a non-negative magnitude. ``delta`` is the signed
    effect on stock, so summing ``delta`` over a material's movements yields
    its current quantity.
    """

    id: int | None = None
    material_id: str
    movement_type: MovementType
    quantity: float = Field(ge=0)
    delta: float
    reason: str
    reference: MovementReference | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ReceiveResult(BaseModel):
    """Result of receiving stock."""

    new_quantity: float
    movement: MaterialMovement


class ConsumeResult(BaseModel):
    """Result of consuming stock."""

    new_quantity: float
    went_negative: bool
    movement: MaterialMovement


class AdjustResult(BaseModel):
    """Result of adjusting stock to an explicit quantity."""

    old_quantity: float
    new_quantity: float
    delta: float
    movement: MaterialMovement


class LedgerStats(BaseModel):
    """Aggregate ledger figures."""

    material_count: int
    low_stock_count: int
    total_quantity: float
    movements_in_window: int
    window_days: int


def quantities_match(a: float, b: float) -> bool:
    """Compare two stock quantities, allowing float drift relative to their size."""
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


class Reconciliation(BaseModel):
    """Stock quantity compared with the sum of its movements."""

    material_id: str
    stock_quantity: float
    ledger_quantity: float
    movement_count: int

    @property
    def balanced(self) -> bool:
        return quantities_match(self.stock_quantity, self.ledger_quantity)


class AppliedMovement(BaseModel):
    """Stock quantity before and after a persisted movement."""

    old_quantity: float
    new_quantity: float
    movement: MaterialMovement
