"""Tests for picture entities."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from artstock.core.entities.picture import (
    CustomPhotoPicture,
    PictureMaterial,
    PictureSize,
    PictureType,
    ReadyMadePicture,
    parse_picture,
)


class TestPictureSize:
    def test_area_and_perimeter(self):
        size = PictureSize(name="30x40", width_cm=30, height_cm=40)
        assert size.area_m2 == pytest.approx(0.12)
        assert size.perimeter_cm == 140

    def test_dimensions_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            PictureSize(name="bad", width_cm=0, height_cm=40)


class TestPictureVariants:
    def test_ready_made_defaults(self):
        picture = ReadyMadePicture(name="Sunset", picture_size_id="s1")
        assert picture.type is PictureType.READY_MADE
        assert picture.in_catalog
        assert picture.source_picture_id is None

    def test_order_copy_not_in_catalog(self):
        picture = ReadyMadePicture(name="Sunset", picture_size_id="s1", order_id="o1")
        assert not picture.in_catalog

    def test_parse_picks_variant_from_type(self):
        picture = parse_picture(
            {
                "type": "CUSTOM_PHOTO",
                "name": "Family",
                "picture_size_id": "s1",
                "photo_url": "https://example.com/p.jpg",
            }
        )
        assert isinstance(picture, CustomPhotoPicture)
        assert picture.photo_url == "https://example.com/p.jpg"

    def test_parse_rejects_unknown_type(self):
        with pytest.raises(PydanticValidationError):
            parse_picture({"type": "SCULPTURE", "name": "x", "picture_size_id": "s1"})

    def test_custom_photo_requires_photo_url(self):
        with pytest.raises(PydanticValidationError):
            CustomPhotoPicture(name="Family", picture_size_id="s1")
        with pytest.raises(PydanticValidationError):
            parse_picture({"type": "CUSTOM_PHOTO", "name": "Family", "picture_size_id": "s1"})

    def test_empty_photo_url_rejected(self):
        with pytest.raises(PydanticValidationError):
            CustomPhotoPicture(name="Family", picture_size_id="s1", photo_url="")

    def test_negative_work_hours_rejected(self):
        with pytest.raises(PydanticValidationError):
            CustomPhotoPicture(name="x", picture_size_id="s1", photo_url="x.jpg", work_hours=-1)


class TestPictureMaterial:
    def test_quantity_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            PictureMaterial(picture_id="p", material_id="m", quantity=0)
