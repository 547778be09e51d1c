"""SQLite implementation of material purchase history."""

import aiosqlite

from artstock.config import get_logger
from artstock.core.entities.material import MaterialPurchase
from artstock.core.entities.stock import (
    AppliedMovement,
    MovementReference,
    MovementType,
    ReferenceKind,
)
from artstock.core.interfaces.purchase_store import IPurchaseStore
from artstock.infrastructure.storage.sqlite import ledger_ops
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLitePurchaseStore(IPurchaseStore):
    """SQLite implementation of material purchase storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def record_purchase(
        self, purchase: MaterialPurchase
    ) -> tuple[MaterialPurchase, AppliedMovement]:
        """Insert the purchase and receive its quantity in one transaction."""
        async with self._pool.transaction() as conn:
            await ledger_ops.ensure_material(conn, purchase.material_id)
            cursor = await conn.execute(
                """
                INSERT INTO material_purchases (
                    material_id, quantity, unit_price, total_price,
                    supplier, purchase_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    purchase.material_id,
                    purchase.quantity,
                    purchase.unit_price,
                    purchase.total_price,
                    purchase.supplier,
                    purchase.purchase_date.isoformat(),
                    purchase.created_at.isoformat(),
                ),
            )
            purchase.id = cursor.lastrowid

            applied = await ledger_ops.apply_movement(
                conn,
                purchase.material_id,
                MovementType.IN,
                purchase.quantity,
                reason="Purchase",
                reference=MovementReference(
                    entity_id=str(purchase.id), kind=ReferenceKind.PURCHASE
                ),
                notes=f"supplier {purchase.supplier}" if purchase.supplier else None,
            )

        logger.info(
            "purchase_recorded",
            purchase_id=purchase.id,
            material_id=purchase.material_id,
            qty=purchase.quantity,
            unit_price=purchase.unit_price,
        )
        return purchase, applied

    async def recent_purchases(
        self, material_id: str, limit: int = 10
    ) -> list[MaterialPurchase]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM material_purchases
                WHERE material_id = ?
                ORDER BY purchase_date DESC, id DESC
                LIMIT ?
                """,
                (material_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_purchase(row) for row in rows]

    @staticmethod
    def _row_to_purchase(row: aiosqlite.Row) -> MaterialPurchase:
        return MaterialPurchase(
            id=row["id"],
            material_id=row["material_id"],
            quantity=float(row["quantity"]),
            unit_price=float(row["unit_price"]),
            supplier=row["supplier"],
            purchase_date=ledger_ops.parse_dt(row["purchase_date"]) or ledger_ops.utcnow(),
            created_at=ledger_ops.parse_dt(row["created_at"]) or ledger_ops.utcnow(),
        )
