"""
SQLite implementation of order consumption storage.

Consumption records are the source of truth for reversal: cancelling returns
what these rows say was taken, never the picture's current bill of materials.
"""

import aiosqlite

from artstock.config import get_logger
from artstock.core.entities.order import OrderConsumption, OrderStatus
from artstock.core.entities.picture import PictureMaterial
from artstock.core.entities.stock import MovementReference, MovementType, ReferenceKind
from artstock.core.exceptions import ConcurrencyConflict
from artstock.core.interfaces.fulfillment_store import IFulfillmentStore
from artstock.infrastructure.storage.sqlite import ledger_ops
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteFulfillmentStore(IFulfillmentStore):
    """SQLite implementation of per-picture consumption and reversal."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def consume_picture(
        self,
        order_id: str,
        picture_id: str,
        lines: list[PictureMaterial],
    ) -> list[OrderConsumption]:
        reference = MovementReference(entity_id=order_id, kind=ReferenceKind.ORDER)
        records: list[OrderConsumption] = []

        async with self._pool.transaction() as conn:
            cursor = await conn.execute("SELECT status FROM orders WHERE id = ?", (order_id,))
            order_row = await cursor.fetchone()
            if order_row is not None and order_row["status"] == OrderStatus.CANCELLED.value:
                raise ConcurrencyConflict(
                    f"order {order_id}", "order was cancelled before its materials were taken"
                )

            cursor = await conn.execute(
                """
                SELECT 1 FROM order_consumptions
                WHERE order_id = ? AND picture_id = ? AND returned_at IS NULL
                LIMIT 1
                """,
                (order_id, picture_id),
            )
            if await cursor.fetchone() is not None:
                logger.debug(
                    "picture_already_consumed",
                    order_id=order_id,
                    picture_id=picture_id,
                )
                return []

            for line in lines:
                applied = await ledger_ops.apply_movement(
                    conn,
                    line.material_id,
                    MovementType.OUT,
                    line.quantity,
                    reason=f"Order {order_id} production",
                    reference=reference,
                    notes=f"picture {picture_id}",
                )
                if applied.new_quantity < 0:
                    logger.warning(
                        "stock_went_negative",
                        material_id=line.material_id,
                        order_id=order_id,
                        picture_id=picture_id,
                        quantity=applied.new_quantity,
                    )
                record = OrderConsumption(
                    order_id=order_id,
                    picture_id=picture_id,
                    material_id=line.material_id,
                    quantity=line.quantity,
                    movement_id=applied.movement.id,
                    consumed_at=applied.movement.created_at,
                )
                cursor = await conn.execute(
                    """
                    INSERT INTO order_consumptions (
                        order_id, picture_id, material_id, quantity,
                        movement_id, consumed_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.order_id,
                        record.picture_id,
                        record.material_id,
                        record.quantity,
                        record.movement_id,
                        record.consumed_at.isoformat(),
                    ),
                )
                record.id = cursor.lastrowid
                records.append(record)

        logger.info(
            "picture_materials_consumed",
            order_id=order_id,
            picture_id=picture_id,
            lines=len(records),
        )
        return records

    async def return_picture(
        self, order_id: str, picture_id: str | None
    ) -> list[OrderConsumption]:
        reference = MovementReference(entity_id=order_id, kind=ReferenceKind.ORDER)
        returned: list[OrderConsumption] = []

        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM order_consumptions
                WHERE order_id = ? AND picture_id IS ? AND returned_at IS NULL
                ORDER BY id
                """,
                (order_id, picture_id),
            )
            rows = await cursor.fetchall()

            for row in rows:
                record = self._row_to_consumption(row)
                applied = await ledger_ops.apply_movement(
                    conn,
                    record.material_id,
                    MovementType.IN,
                    record.quantity,
                    reason=f"Order {order_id} cancelled",
                    reference=reference,
                    notes=f"picture {picture_id}" if picture_id else "deleted picture",
                )
                record.returned_at = applied.movement.created_at
                record.return_movement_id = applied.movement.id
                await conn.execute(
                    """
                    UPDATE order_consumptions
                    SET returned_at = ?, return_movement_id = ?
                    WHERE id = ?
                    """,
                    (record.returned_at.isoformat(), record.return_movement_id, record.id),
                )
                returned.append(record)

        if returned:
            logger.info(
                "picture_materials_returned",
                order_id=order_id,
                picture_id=picture_id,
                lines=len(returned),
            )
        return returned

    async def outstanding_for_order(self, order_id: str) -> list[OrderConsumption]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM order_consumptions
                WHERE order_id = ? AND returned_at IS NULL
                ORDER BY id
                """,
                (order_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_consumption(row) for row in rows]

    async def consumed_picture_ids(self, order_id: str) -> set[str]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT DISTINCT picture_id FROM order_consumptions
                WHERE order_id = ? AND returned_at IS NULL AND picture_id IS NOT NULL
                """,
                (order_id,),
            )
            rows = await cursor.fetchall()
            return {row["picture_id"] for row in rows}

    async def list_consumptions(self, order_id: str) -> list[OrderConsumption]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM order_consumptions WHERE order_id = ? ORDER BY id",
                (order_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_consumption(row) for row in rows]

    @staticmethod
    def _row_to_consumption(row: aiosqlite.Row) -> OrderConsumption:
        return OrderConsumption(
            id=row["id"],
            order_id=row["order_id"],
            picture_id=row["picture_id"],
            material_id=row["material_id"],
            quantity=float(row["quantity"]),
            movement_id=row["movement_id"],
            consumed_at=ledger_ops.parse_dt(row["consumed_at"]) or ledger_ops.utcnow(),
            returned_at=ledger_ops.parse_dt(row["returned_at"]),
            return_movement_id=row["return_movement_id"],
        )
