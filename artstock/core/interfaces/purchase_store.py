"""Abstract interface for material purchase history."""

from abc import ABC, abstractmethod

from artstock.core.entities.material import MaterialPurchase
from artstock.core.entities.stock import AppliedMovement


class IPurchaseStore(ABC):
    """Abstract interface for material purchases."""

    @abstractmethod
    async def record_purchase(
        self, purchase: MaterialPurchase
    ) -> tuple[MaterialPurchase, AppliedMovement]:
        """Insert a purchase and its IN movement in one transaction."""

    @abstractmethod
    async def recent_purchases(
        self, material_id: str, limit: int = 10
    ) -> list[MaterialPurchase]:
        """Most recent purchases of a material, newest first."""
