"""SQLite implementation of material catalog storage."""

import uuid

import aiosqlite

from artstock.config import get_logger
from artstock.core.entities.material import Material, MaterialCategory
from artstock.core.interfaces.material_store import IMaterialStore
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool
from artstock.infrastructure.storage.sqlite.ledger_ops import parse_dt, utcnow

logger = get_logger(__name__)


def _generate_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


class SQLiteMaterialStore(IMaterialStore):
    """SQLite implementation of material catalog storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_material(self, material: Material) -> Material:
        """Create a new material record."""
        if not material.id:
            material.id = _generate_id()
        material.updated_at = utcnow()
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO materials (
                    id, name, unit, category, is_active, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    material.id,
                    material.name,
                    material.unit,
                    material.category.value,
                    int(material.is_active),
                    material.created_at.isoformat(),
                    material.updated_at.isoformat(),
                ),
            )
        logger.info(
            "material_created",
            material_id=material.id,
            name=material.name,
            category=material.category.value,
        )
        return material

    async def get_material(self, material_id: str) -> Material | None:
        """Get material by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_material(row)

    async def list_materials(
        self,
        limit: int = 100,
        offset: int = 0,
        category: MaterialCategory | None = None,
        active_only: bool = False,
    ) -> list[Material]:
        """List materials with pagination and optional filters."""
        conditions = []
        params: list = []
        if category is not None:
            conditions.append("category = ?")
            params.append(category.value)
        if active_only:
            conditions.append("is_active = 1")
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM materials
                {where}
                ORDER BY name
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def first_active_by_category(
        self, category: MaterialCategory
    ) -> Material | None:
        """Oldest active material of a category, if any."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM materials
                WHERE category = ? AND is_active = 1
                ORDER BY created_at, rowid
                LIMIT 1
                """,
                (category.value,),
            )
            row = await cursor.fetchone()
            return self._row_to_material(row) if row else None

    async def deactivate_material(self, material_id: str) -> bool:
        """Mark a material inactive."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE materials SET is_active = 0, updated_at = ? WHERE id = ?",
                (utcnow().isoformat(), material_id),
            )
            deactivated = cursor.rowcount > 0
        if deactivated:
            logger.info("material_deactivated", material_id=material_id)
        return deactivated

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        """Convert a database row to a Material entity."""
        return Material(
            id=row["id"],
            name=row["name"],
            unit=row["unit"],
            category=MaterialCategory(row["category"]),
            is_active=bool(row["is_active"]),
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
        )
