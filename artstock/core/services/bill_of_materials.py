"""
Standard bill-of-materials generation from a picture's size.

For a ``w x h`` cm picture, with area in square metres:

- canvas: ceil(area * 1.1)
- frame: ceil(perimeter_cm / 100)
- paint: ceil(area * 0.5)
- brushes: 3

Each line uses the first active material of its category. Categories with no
active material are skipped.
"""

import math

from artstock.config import get_logger
from artstock.core.entities.material import MaterialCategory
from artstock.core.entities.picture import PictureMaterial, PictureSize, RebuiltMaterials
from artstock.core.exceptions import PictureNotFoundError, PictureSizeNotFoundError
from artstock.core.interfaces.material_store import IMaterialStore
from artstock.core.interfaces.picture_store import IPictureStore

logger = get_logger(__name__)

CANVAS_WASTE_FACTOR = 1.1
PAINT_PER_M2 = 0.5
BRUSHES_PER_PICTURE = 3


def standard_quantities(size: PictureSize) -> dict[MaterialCategory, float]:
    """Quantity per category for one picture of ``size``."""
    return {
        MaterialCategory.CANVAS: math.ceil(size.area_m2 * CANVAS_WASTE_FACTOR),
        MaterialCategory.FRAME: math.ceil(size.perimeter_cm / 100),
        MaterialCategory.PAINT: math.ceil(size.area_m2 * PAINT_PER_M2),
        MaterialCategory.BRUSH: BRUSHES_PER_PICTURE,
    }


class BillOfMaterialsService:
    """Reads and materializes picture bills of materials."""

    def __init__(self, picture_store: IPictureStore, material_store: IMaterialStore):
        self._picture_store = picture_store
        self._material_store = material_store

    async def build_standard(self, picture_id: str, size: PictureSize) -> list[PictureMaterial]:
        lines = []
        for category, quantity in standard_quantities(size).items():
            if quantity <= 0:
                continue
            material = await self._material_store.first_active_by_category(category)
            if material is None:
                logger.debug("bom_category_unavailable", category=category.value)
                continue
            lines.append(
                PictureMaterial(
                    picture_id=picture_id,
                    material_id=material.id,
                    quantity=float(quantity),
                )
            )
        return lines

    async def materialize_standard(self, picture_id: str) -> list[PictureMaterial]:
        """
        Write the standard bill of materials for a picture.

        Replaces any existing lines. Returns the stored lines, possibly empty.
        """
        picture = await self._picture_store.get_picture(picture_id)
        if picture is None:
            raise PictureNotFoundError(picture_id)
        size = await self._picture_store.get_size(picture.picture_size_id)
        if size is None:
            raise PictureSizeNotFoundError(picture.picture_size_id)

        lines = await self.build_standard(picture_id, size)
        stored = await self._picture_store.replace_bill_of_materials(picture_id, lines)
        logger.info(
            "standard_bom_materialized",
            picture_id=picture_id,
            size=size.name,
            lines=len(stored),
        )
        return stored

    async def rebuild(
        self, picture_id: str, picture_size_id: str | None = None
    ) -> RebuiltMaterials:
        """
        Regenerate the standard bill of materials, after an optional size change.

        Any existing lines, hand-edited ones included, are replaced. Both
        references are checked before anything is written.

        Raises:
            PictureNotFoundError: unknown picture.
            PictureSizeNotFoundError: unknown target size.
        """
        picture = await self._picture_store.get_picture(picture_id)
        if picture is None:
            raise PictureNotFoundError(picture_id)
        if picture_size_id and picture_size_id != picture.picture_size_id:
            if await self._picture_store.get_size(picture_size_id) is None:
                raise PictureSizeNotFoundError(picture_size_id)
            await self._picture_store.update_size(picture_id, picture_size_id)
            logger.info(
                "picture_resized",
                picture_id=picture_id,
                old_size_id=picture.picture_size_id,
                new_size_id=picture_size_id,
            )
        lines = await self.materialize_standard(picture_id)
        return RebuiltMaterials(
            picture_id=picture_id,
            picture_size_id=picture_size_id or picture.picture_size_id,
            lines=lines,
        )

    async def ensure(self, picture_id: str) -> list[PictureMaterial]:
        """The picture's lines, materializing the standard set when it has none."""
        lines = await self._picture_store.get_bill_of_materials(picture_id)
        if lines:
            return lines
        return await self.materialize_standard(picture_id)

    async def copy(self, source_picture_id: str, target_picture_id: str) -> list[PictureMaterial]:
        """Copy a picture's lines onto another picture."""
        source_lines = await self._picture_store.get_bill_of_materials(source_picture_id)
        lines = [
            PictureMaterial(
                picture_id=target_picture_id,
                material_id=line.material_id,
                quantity=line.quantity,
            )
            for line in source_lines
        ]
        return await self._picture_store.replace_bill_of_materials(target_picture_id, lines)
