"""Abstract interface for picture, size and bill-of-materials storage."""

from abc import ABC, abstractmethod

from artstock.core.entities.picture import (
    CustomPhotoPicture,
    PictureMaterial,
    PictureSize,
    PictureType,
    ReadyMadePicture,
)

AnyPicture = ReadyMadePicture | CustomPhotoPicture


class IPictureStore(ABC):
    """Abstract interface for pictures and their bills of materials."""

    # Sizes
    @abstractmethod
    async def create_size(self, size: PictureSize) -> PictureSize:
        """Create a picture size."""

    @abstractmethod
    async def get_size(self, size_id: str) -> PictureSize | None:
        """Get picture size by ID."""

    # Pictures
    @abstractmethod
    async def create_picture(self, picture: AnyPicture) -> AnyPicture:
        """Create a picture of either variant."""

    @abstractmethod
    async def get_picture(self, picture_id: str) -> AnyPicture | None:
        """Get picture by ID."""

    @abstractmethod
    async def list_pictures(
        self,
        material_id: str | None = None,
        picture_type: PictureType | None = None,
        active_only: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AnyPicture]:
        """
        List pictures.

        ``material_id`` restricts to pictures whose bill of materials uses
        that material.
        """

    @abstractmethod
    async def list_order_pictures(self, order_id: str) -> list[AnyPicture]:
        """Pictures attached to an order, oldest first."""

    @abstractmethod
    async def update_costing(
        self,
        picture_id: str,
        cost_price: float | None = None,
        price: float | None = None,
    ) -> None:
        """Write cost_price and/or price. ``None`` leaves a field unchanged."""

    @abstractmethod
    async def update_size(self, picture_id: str, picture_size_id: str) -> None:
        """Point a picture at another size. Its bill of materials is left as is."""

    @abstractmethod
    async def delete_picture(self, picture_id: str) -> bool:
        """Delete a picture and its bill of materials."""

    # Bill of materials
    @abstractmethod
    async def get_bill_of_materials(self, picture_id: str) -> list[PictureMaterial]:
        """Bill-of-materials lines of a picture."""

    @abstractmethod
    async def replace_bill_of_materials(
        self, picture_id: str, lines: list[PictureMaterial]
    ) -> list[PictureMaterial]:
        """Replace all lines of a picture's bill of materials atomically."""
