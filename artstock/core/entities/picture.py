"""
Picture domain entities.

A picture is either a ready-made catalog piece (or an order copy of one) or a
custom piece painted from a customer photo. The two variants share the
costing fields and differ in what identifies their origin, so they are modelled
as a discriminated union on ``type``.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class PictureType(str, Enum):
    """Picture variants."""

    READY_MADE = "READY_MADE"
    CUSTOM_PHOTO = "CUSTOM_PHOTO"


class PictureSize(BaseModel):
    """Physical size of a picture in centimetres."""

    id: str | None = None
    name: str
    width_cm: float = Field(gt=0)
    height_cm: float = Field(gt=0)

    @property
    def area_m2(self) -> float:
        return (self.width_cm * self.height_cm) / 10000

    @property
    def perimeter_cm(self) -> float:
        return 2 * (self.width_cm + self.height_cm)


class PictureMaterial(BaseModel):
    """One bill-of-materials line: material quantity needed per picture."""

    id: int | None = None
    picture_id: str
    material_id: str
    quantity: float = Field(gt=0)


class _PictureBase(BaseModel):
    id: str | None = None
    name: str
    picture_size_id: str
    order_id: str | None = None
    description: str | None = None
    price: float = 0.0
    cost_price: float | None = None
    work_hours: float = Field(default=0.0, ge=0)
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def in_catalog(self) -> bool:
        return self.order_id is None


class ReadyMadePicture(_PictureBase):
    """A catalog piece, or an order copy of one."""

    type: Literal[PictureType.READY_MADE] = PictureType.READY_MADE
    source_picture_id: str | None = None
    image_url: str | None = None


class CustomPhotoPicture(_PictureBase):
    """A piece painted from a customer-supplied photo."""

    type: Literal[PictureType.CUSTOM_PHOTO] = PictureType.CUSTOM_PHOTO
    photo_url: str = Field(..., min_length=1)


Picture = Annotated[
    ReadyMadePicture | CustomPhotoPicture,
    Field(discriminator="type"),
]

_picture_adapter: TypeAdapter[ReadyMadePicture | CustomPhotoPicture] = TypeAdapter(Picture)


def parse_picture(data: dict) -> ReadyMadePicture | CustomPhotoPicture:
    """Build the right picture variant from a flat mapping."""
    return _picture_adapter.validate_python(data)


class RebuiltMaterials(BaseModel):
    """A picture's regenerated bill of materials and the size it was built for."""

    picture_id: str
    picture_size_id: str
    lines: list[PictureMaterial] = Field(default_factory=list)
