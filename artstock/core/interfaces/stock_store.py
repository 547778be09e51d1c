"""Abstract interface for the stock ledger storage."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from artstock.core.entities.stock import (
    AppliedMovement,
    MaterialMovement,
    MovementReference,
    MovementType,
    Stock,
)


class IStockLedgerStore(ABC):
    """
    Persistence for stock rows and the append-only movement log.

    Every mutating method runs in a single write transaction: the stock row
    and its movement are written together or not at all.
    """

    @abstractmethod
    async def apply_movement(
        self,
        material_id: str,
        movement_type: MovementType,
        quantity: float,
        reason: str,
        reference: MovementReference | None = None,
        notes: str | None = None,
    ) -> AppliedMovement:
        """
        Apply an IN or OUT movement.

        Creates the stock row if absent. Raises MaterialNotFoundError when the
        material does not exist.
        """

    @abstractmethod
    async def set_quantity(
        self,
        material_id: str,
        new_quantity: float,
        reason: str,
        notes: str | None = None,
    ) -> AppliedMovement:
        """Set an exact quantity and append the matching ADJUSTMENT."""

    @abstractmethod
    async def get_stock(self, material_id: str) -> Stock | None:
        """Get the stock row for a material."""

    @abstractmethod
    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[Stock]:
        """Stock rows at or below their min_level."""

    @abstractmethod
    async def set_min_level(self, material_id: str, min_level: float | None) -> Stock:
        """Set the low-stock threshold, creating the stock row if needed."""

    @abstractmethod
    async def list_movements(
        self,
        material_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MaterialMovement]:
        """Movements, most recent first."""

    @abstractmethod
    async def get_stats(self, since: datetime) -> dict[str, Any]:
        """
        Aggregate figures.

        Keys: material_count, low_stock_count, total_quantity,
        movements_in_window (movements created at or after ``since``).
        """

    @abstractmethod
    async def ledger_totals(self, material_id: str) -> tuple[float, int]:
        """Sum of movement deltas and movement count for a material."""
