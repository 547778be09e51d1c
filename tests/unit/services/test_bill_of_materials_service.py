"""Tests for standard bill-of-materials generation."""

from unittest.mock import AsyncMock

import pytest

from artstock.core.entities.material import Material, MaterialCategory
from artstock.core.entities.picture import (
    CustomPhotoPicture,
    PictureMaterial,
    PictureSize,
)
from artstock.core.exceptions import PictureNotFoundError, PictureSizeNotFoundError
from artstock.core.services import BillOfMaterialsService
from artstock.core.services.bill_of_materials import standard_quantities


class TestStandardQuantities:
    def test_30x40(self):
        quantities = standard_quantities(PictureSize(name="30x40", width_cm=30, height_cm=40))
        assert quantities == {
            MaterialCategory.CANVAS: 1,
            MaterialCategory.FRAME: 2,
            MaterialCategory.PAINT: 1,
            MaterialCategory.BRUSH: 3,
        }

    def test_100x150(self):
        quantities = standard_quantities(
            PictureSize(name="100x150", width_cm=100, height_cm=150)
        )
        # area 1.5 m2, perimeter 500 cm
        assert quantities[MaterialCategory.CANVAS] == 2
        assert quantities[MaterialCategory.FRAME] == 5
        assert quantities[MaterialCategory.PAINT] == 1
        assert quantities[MaterialCategory.BRUSH] == 3


@pytest.fixture
def picture_store():
    store = AsyncMock()
    store.replace_bill_of_materials.side_effect = lambda picture_id, lines: lines
    return store


@pytest.fixture
def material_store():
    store = AsyncMock()

    async def first_active(category):
        if category is MaterialCategory.PAINT:
            return None
        return Material(id=f"MAT-{category.value}", name=category.value, category=category)

    store.first_active_by_category.side_effect = first_active
    return store


@pytest.fixture
def service(picture_store, material_store):
    return BillOfMaterialsService(picture_store, material_store)


class TestBillOfMaterialsService:
    async def test_materialize_skips_unavailable_categories(self, service, picture_store):
        picture_store.get_picture.return_value = CustomPhotoPicture(
            id="PIC-1", name="Portrait", picture_size_id="S1", photo_url="p.jpg"
        )
        picture_store.get_size.return_value = PictureSize(
            id="S1", name="30x40", width_cm=30, height_cm=40
        )

        lines = await service.materialize_standard("PIC-1")

        assert {line.material_id: line.quantity for line in lines} == {
            "MAT-CANVAS": 1.0,
            "MAT-FRAME": 2.0,
            "MAT-BRUSH": 3.0,
        }

    async def test_materialize_unknown_picture(self, service, picture_store):
        picture_store.get_picture.return_value = None
        with pytest.raises(PictureNotFoundError):
            await service.materialize_standard("PIC-404")

    async def test_materialize_unknown_size(self, service, picture_store):
        picture_store.get_picture.return_value = CustomPhotoPicture(
            id="PIC-1", name="Portrait", picture_size_id="S404", photo_url="p.jpg"
        )
        picture_store.get_size.return_value = None
        with pytest.raises(PictureSizeNotFoundError):
            await service.materialize_standard("PIC-1")

    async def test_ensure_keeps_existing_lines(self, service, picture_store):
        existing = [PictureMaterial(id=1, picture_id="PIC-1", material_id="M", quantity=2)]
        picture_store.get_bill_of_materials.return_value = existing

        assert await service.ensure("PIC-1") == existing
        picture_store.replace_bill_of_materials.assert_not_called()

    async def test_copy_retargets_lines(self, service, picture_store):
        picture_store.get_bill_of_materials.return_value = [
            PictureMaterial(id=1, picture_id="SRC", material_id="M1", quantity=2),
            PictureMaterial(id=2, picture_id="SRC", material_id="M2", quantity=0.5),
        ]

        lines = await service.copy("SRC", "DST")

        assert [line.picture_id for line in lines] == ["DST", "DST"]
        assert [line.quantity for line in lines] == [2, 0.5]


@pytest.fixture
def resizable(picture_store):
    """PIC-1 at 30x40 whose size follows update_size calls."""
    current = {"size": "S1"}
    sizes = {
        "S1": PictureSize(id="S1", name="30x40", width_cm=30, height_cm=40),
        "S2": PictureSize(id="S2", name="100x150", width_cm=100, height_cm=150),
    }

    async def get_picture(picture_id):
        if picture_id != "PIC-1":
            return None
        return CustomPhotoPicture(
            id="PIC-1", name="Portrait", picture_size_id=current["size"], photo_url="p.jpg"
        )

    async def get_size(size_id):
        return sizes.get(size_id)

    async def update_size(picture_id, picture_size_id):
        current["size"] = picture_size_id

    picture_store.get_picture.side_effect = get_picture
    picture_store.get_size.side_effect = get_size
    picture_store.update_size.side_effect = update_size
    return current


class TestRebuild:
    async def test_size_change_rebuilds_for_new_size(self, service, picture_store, resizable):
        result = await service.rebuild("PIC-1", "S2")

        picture_store.update_size.assert_awaited_once_with("PIC-1", "S2")
        assert result.picture_size_id == "S2"
        assert {line.material_id: line.quantity for line in result.lines} == {
            "MAT-CANVAS": 2.0,
            "MAT-FRAME": 5.0,
            "MAT-BRUSH": 3.0,
        }

    async def test_without_size_rebuilds_in_place(self, service, picture_store, resizable):
        result = await service.rebuild("PIC-1")

        picture_store.update_size.assert_not_called()
        picture_store.replace_bill_of_materials.assert_awaited_once()
        assert result.picture_size_id == "S1"
        assert {line.material_id: line.quantity for line in result.lines}["MAT-FRAME"] == 2.0

    async def test_same_size_is_not_rewritten(self, service, picture_store, resizable):
        await service.rebuild("PIC-1", "S1")
        picture_store.update_size.assert_not_called()

    async def test_unknown_target_size_writes_nothing(self, service, picture_store, resizable):
        with pytest.raises(PictureSizeNotFoundError):
            await service.rebuild("PIC-1", "S404")

        picture_store.update_size.assert_not_called()
        picture_store.replace_bill_of_materials.assert_not_called()

    async def test_unknown_picture(self, service, resizable):
        with pytest.raises(PictureNotFoundError):
            await service.rebuild("PIC-404", "S2")
