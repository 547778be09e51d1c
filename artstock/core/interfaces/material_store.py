"""
Abstract interface for material catalog storage.

Materials are never hard-deleted once the ledger references them, so the
contract offers deactivation only.
"""

from abc import ABC, abstractmethod

from artstock.core.entities.material import Material, MaterialCategory


class IMaterialStore(ABC):
    """Abstract interface for material catalog storage."""

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Create a new material record."""

    @abstractmethod
    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""

    @abstractmethod
    async def list_materials(
        self,
        limit: int = 100,
        offset: int = 0,
        category: MaterialCategory | None = None,
        active_only: bool = False,
    ) -> list[Material]:
        """List materials with pagination and optional filters."""

    @abstractmethod
    async def first_active_by_category(
        self, category: MaterialCategory
    ) -> Material | None:
        """Oldest active material of a category, if any."""

    @abstractmethod
    async def deactivate_material(self, material_id: str) -> bool:
        """Mark a material inactive. Returns False if it does not exist."""
