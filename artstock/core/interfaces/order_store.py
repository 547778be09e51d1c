"""Abstract interface for order storage and order-number allocation."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from artstock.core.entities.order import Order, OrderStatus


class IOrderStore(ABC):
    """Abstract interface for orders."""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """
        Insert an order.

        Raises ConcurrencyConflict when ``order_number`` is already taken.
        """

    @abstractmethod
    async def get_order(self, order_id: str) -> Order | None:
        """Get order by ID."""

    @abstractmethod
    async def get_by_number(self, order_number: str) -> Order | None:
        """Get order by its order number."""

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        completed_at: datetime | None = None,
        expected_status: OrderStatus | None = None,
    ) -> Order:
        """
        Persist a new status in its own transaction.

        With ``expected_status`` the write only lands if the order still has
        that status; otherwise ConcurrencyConflict is raised.
        """

    @abstractmethod
    async def mark_materials_consumed(self, order_id: str, at: datetime) -> None:
        """Stamp materials_consumed_at."""

    @abstractmethod
    async def mark_materials_returned(self, order_id: str, at: datetime) -> None:
        """Stamp materials_returned_at."""

    @abstractmethod
    async def update_total_price(self, order_id: str, total_price: float) -> None:
        """Set the order total."""

    # Numbering
    @abstractmethod
    async def allocate_sequence(self, prefix: str, day: date) -> int:
        """
        Atomically reserve the next sequence for ``prefix`` on ``day``.

        The counter is seeded from the highest existing order number, so
        numbers issued before the counter existed are never reissued.
        """

    @abstractmethod
    async def number_exists(self, order_number: str) -> bool:
        """Whether an order with this number exists."""

    @abstractmethod
    async def count_numbers_by_prefix(
        self, start: datetime, end: datetime
    ) -> dict[str, int]:
        """Orders created in [start, end] grouped by number prefix."""
