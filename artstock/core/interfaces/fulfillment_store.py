"""Abstract interface for order consumption records."""

from abc import ABC, abstractmethod

from artstock.core.entities.order import OrderConsumption
from artstock.core.entities.picture import PictureMaterial


class IFulfillmentStore(ABC):
    """
    Consumption and reversal of picture materials for orders.

    Each call covers one picture and runs in one write transaction: the
    stock movements and the consumption records commit together.
    """

    @abstractmethod
    async def consume_picture(
        self,
        order_id: str,
        picture_id: str,
        lines: list[PictureMaterial],
    ) -> list[OrderConsumption]:
        """
        Take every line from stock and record it.

        Returns an empty list without touching stock when the picture already
        has outstanding consumption for this order. Raises ConcurrencyConflict
        when the order has been cancelled in the meantime.
        """

    @abstractmethod
    async def return_picture(
        self, order_id: str, picture_id: str | None
    ) -> list[OrderConsumption]:
        """
        Return exactly the outstanding consumption of a picture to stock.

        ``picture_id=None`` targets records whose picture was deleted.
        """

    @abstractmethod
    async def outstanding_for_order(self, order_id: str) -> list[OrderConsumption]:
        """Consumption records not yet returned."""

    @abstractmethod
    async def consumed_picture_ids(self, order_id: str) -> set[str]:
        """Pictures of an order with outstanding consumption."""

    @abstractmethod
    async def list_consumptions(self, order_id: str) -> list[OrderConsumption]:
        """All consumption records of an order, returned or not."""
