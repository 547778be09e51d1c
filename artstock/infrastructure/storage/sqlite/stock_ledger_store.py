"""SQLite implementation of the stock ledger storage."""

from datetime import datetime
from typing import Any

from artstock.config import get_logger
from artstock.core.entities.stock import (
    AppliedMovement,
    MaterialMovement,
    MovementReference,
    MovementType,
    Stock,
)
from artstock.core.interfaces.stock_store import IStockLedgerStore
from artstock.infrastructure.storage.sqlite import ledger_ops
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteStockLedgerStore(IStockLedgerStore):
    """SQLite implementation of stock rows and movement log storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def apply_movement(
        self,
        material_id: str,
        movement_type: MovementType,
        quantity: float,
        reason: str,
        reference: MovementReference | None = None,
        notes: str | None = None,
    ) -> AppliedMovement:
        async with self._pool.transaction() as conn:
            applied = await ledger_ops.apply_movement(
                conn, material_id, movement_type, quantity, reason, reference, notes
            )
        logger.debug(
            "stock_movement_recorded",
            movement_id=applied.movement.id,
            material_id=material_id,
            type=movement_type.value,
            qty=quantity,
        )
        return applied

    async def set_quantity(
        self,
        material_id: str,
        new_quantity: float,
        reason: str,
        notes: str | None = None,
    ) -> AppliedMovement:
        async with self._pool.transaction() as conn:
            applied = await ledger_ops.set_quantity(
                conn, material_id, new_quantity, reason, notes
            )
        logger.debug(
            "stock_movement_recorded",
            movement_id=applied.movement.id,
            material_id=material_id,
            type=MovementType.ADJUSTMENT.value,
            qty=applied.movement.quantity,
        )
        return applied

    async def get_stock(self, material_id: str) -> Stock | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM stocks WHERE material_id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            return ledger_ops.row_to_stock(row) if row else None

    async def list_low_stock(self, limit: int = 100, offset: int = 0) -> list[Stock]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stocks
                WHERE min_level IS NOT NULL AND quantity <= min_level
                ORDER BY quantity - min_level, material_id
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [ledger_ops.row_to_stock(row) for row in rows]

    async def set_min_level(self, material_id: str, min_level: float | None) -> Stock:
        now = ledger_ops.utcnow().isoformat()
        async with self._pool.transaction() as conn:
            await ledger_ops.ensure_material(conn, material_id)
            await conn.execute(
                """
                INSERT INTO stocks (material_id, quantity, min_level, updated_at)
                VALUES (?, 0, ?, ?)
                ON CONFLICT(material_id) DO UPDATE SET
                    min_level = excluded.min_level,
                    updated_at = excluded.updated_at
                """,
                (material_id, min_level, now),
            )
            cursor = await conn.execute(
                "SELECT * FROM stocks WHERE material_id = ?", (material_id,)
            )
            row = await cursor.fetchone()
        logger.info("stock_min_level_set", material_id=material_id, min_level=min_level)
        return ledger_ops.row_to_stock(row)

    async def list_movements(
        self,
        material_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MaterialMovement]:
        async with self._pool.acquire() as conn:
            if material_id:
                cursor = await conn.execute(
                    """
                    SELECT * FROM material_movements
                    WHERE material_id = ?
                    ORDER BY created_at DESC, id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (material_id, limit, offset),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM material_movements
                    ORDER BY created_at DESC, id DESC
                    LIMIT ? OFFSET ?
                    """,
                    (limit, offset),
                )
            rows = await cursor.fetchall()
            return [ledger_ops.row_to_movement(row) for row in rows]

    async def get_stats(self, since: datetime) -> dict[str, Any]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM materials WHERE is_active = 1"
            )
            material_count = (await cursor.fetchone())[0]

            cursor = await conn.execute(
                """
                SELECT
                    COALESCE(SUM(quantity), 0),
                    COALESCE(SUM(CASE WHEN min_level IS NOT NULL
                                      AND quantity <= min_level THEN 1 ELSE 0 END), 0)
                FROM stocks
                """
            )
            total_quantity, low_stock_count = await cursor.fetchone()

            cursor = await conn.execute(
                "SELECT COUNT(*) FROM material_movements WHERE created_at >= ?",
                (since.isoformat(),),
            )
            movements_in_window = (await cursor.fetchone())[0]

        return {
            "material_count": int(material_count),
            "low_stock_count": int(low_stock_count),
            "total_quantity": float(total_quantity),
            "movements_in_window": int(movements_in_window),
        }

    async def ledger_totals(self, material_id: str) -> tuple[float, int]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(delta), 0), COUNT(*)
                FROM material_movements
                WHERE material_id = ?
                """,
                (material_id,),
            )
            total, count = await cursor.fetchone()
            return float(total), int(count)
