"""
Material domain entity for the materials catalog.

Represents a consumable input (canvas, paint, frame) tracked by quantity.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MaterialCategory(str, Enum):
    """Material categories used by standard bill-of-materials generation."""

    CANVAS = "CANVAS"
    FRAME = "FRAME"
    PAINT = "PAINT"
    BRUSH = "BRUSH"
    STRETCHER = "STRETCHER"
    VARNISH = "VARNISH"
    OTHER = "OTHER"


class Material(BaseModel):
    """
    A material in the catalog.

    Never hard-deleted once movements reference it; deactivate instead.
    """

    id: str | None = None
    name: str
    unit: str = "pcs"
    category: MaterialCategory = MaterialCategory.OTHER
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class MaterialPurchase(BaseModel):
    """A purchase of a material; the input for material unit cost."""

    id: int | None = None
    material_id: str
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)
    supplier: str | None = None
    purchase_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_price(self) -> float:
        """Total amount paid for the purchase."""
        return self.quantity * self.unit_price
