"""SQLite implementation of order storage and order-number counters."""

import uuid
from datetime import date, datetime

import aiosqlite

from artstock.config import get_logger
from artstock.core.entities.order import Order, OrderStatus
from artstock.core.exceptions import ConcurrencyConflict, OrderNotFoundError
from artstock.core.interfaces.order_store import IOrderStore
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool
from artstock.infrastructure.storage.sqlite.ledger_ops import parse_dt, utcnow

logger = get_logger(__name__)


class SQLiteOrderStore(IOrderStore):
    """SQLite implementation of order storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def create_order(self, order: Order) -> Order:
        if not order.id:
            order.id = str(uuid.uuid4())
        order.updated_at = utcnow()
        try:
            async with self._pool.transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO orders (
                        id, order_number, customer_name, status, notes,
                        total_price, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.id,
                        order.order_number,
                        order.customer_name,
                        order.status.value,
                        order.notes,
                        order.total_price,
                        order.created_at.isoformat(),
                        order.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            if "order_number" in str(e):
                raise ConcurrencyConflict("order_number", order.order_number) from e
            raise
        logger.info(
            "order_created",
            order_id=order.id,
            order_number=order.order_number,
        )
        return order

    async def get_order(self, order_id: str) -> Order | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            row = await cursor.fetchone()
            return self._row_to_order(row) if row else None

    async def get_by_number(self, order_number: str) -> Order | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM orders WHERE order_number = ?", (order_number,)
            )
            row = await cursor.fetchone()
            return self._row_to_order(row) if row else None

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        completed_at: datetime | None = None,
        expected_status: OrderStatus | None = None,
    ) -> Order:
        query = """
            UPDATE orders SET
                status = ?,
                completed_at = COALESCE(?, completed_at),
                updated_at = ?
            WHERE id = ?
        """
        params: list = [
            status.value,
            completed_at.isoformat() if completed_at else None,
            utcnow().isoformat(),
            order_id,
        ]
        if expected_status is not None:
            query += " AND status = ?"
            params.append(expected_status.value)

        async with self._pool.transaction() as conn:
            cursor = await conn.execute(query, params)
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT status FROM orders WHERE id = ?", (order_id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise OrderNotFoundError(order_id)
                # Only reachable with expected_status set: another writer moved the order
                expected = expected_status.value if expected_status else None
                logger.warning(
                    "order_status_conflict",
                    order_id=order_id,
                    expected=expected,
                    actual=row["status"],
                    requested=status.value,
                )
                raise ConcurrencyConflict(
                    f"order {order_id}",
                    f"status is now {row['status']}, expected {expected}",
                )
            cursor = await conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,))
            row = await cursor.fetchone()
        return self._row_to_order(row)

    async def mark_materials_consumed(self, order_id: str, at: datetime) -> None:
        await self._stamp(order_id, "materials_consumed_at", at)

    async def mark_materials_returned(self, order_id: str, at: datetime) -> None:
        await self._stamp(order_id, "materials_returned_at", at)

    async def _stamp(self, order_id: str, column: str, at: datetime) -> None:
        async with self._pool.transaction() as conn:
            await conn.execute(
                f"UPDATE orders SET {column} = ?, updated_at = ? WHERE id = ?",
                (at.isoformat(), utcnow().isoformat(), order_id),
            )

    async def update_total_price(self, order_id: str, total_price: float) -> None:
        async with self._pool.transaction() as conn:
            await conn.execute(
                "UPDATE orders SET total_price = ?, updated_at = ? WHERE id = ?",
                (total_price, utcnow().isoformat(), order_id),
            )

    async def allocate_sequence(self, prefix: str, day: date) -> int:
        """
        Reserve the next sequence with one upsert on the counter row.

        The write lock is held from BEGIN IMMEDIATE, so the seed read and the
        upsert cannot interleave with another allocator.
        """
        day_key = day.isoformat()
        stem = f"{prefix}-{day_key}-"
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(MAX(CAST(substr(order_number, ?) AS INTEGER)), 0)
                FROM orders
                WHERE substr(order_number, 1, ?) = ?
                """,
                (len(stem) + 1, len(stem), stem),
            )
            seed = (await cursor.fetchone())[0]

            await conn.execute(
                """
                INSERT INTO order_number_counters (prefix, day, last_seq)
                VALUES (?, ?, ?)
                ON CONFLICT(prefix, day) DO UPDATE SET
                    last_seq = MAX(last_seq + 1, excluded.last_seq)
                """,
                (prefix, day_key, int(seed) + 1),
            )
            cursor = await conn.execute(
                "SELECT last_seq FROM order_number_counters WHERE prefix = ? AND day = ?",
                (prefix, day_key),
            )
            sequence = int((await cursor.fetchone())[0])
        logger.debug("order_sequence_allocated", prefix=prefix, day=day_key, sequence=sequence)
        return sequence

    async def number_exists(self, order_number: str) -> bool:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM orders WHERE order_number = ?", (order_number,)
            )
            return await cursor.fetchone() is not None

    async def count_numbers_by_prefix(
        self, start: datetime, end: datetime
    ) -> dict[str, int]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT substr(order_number, 1, instr(order_number, '-') - 1) AS prefix,
                       COUNT(*) AS total
                FROM orders
                WHERE created_at >= ? AND created_at <= ?
                GROUP BY prefix
                ORDER BY prefix
                """,
                (start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return {row["prefix"]: int(row["total"]) for row in rows}

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> Order:
        """Convert a database row to an Order entity."""
        return Order(
            id=row["id"],
            order_number=row["order_number"],
            customer_name=row["customer_name"],
            status=OrderStatus(row["status"]),
            notes=row["notes"],
            total_price=float(row["total_price"]),
            materials_consumed_at=parse_dt(row["materials_consumed_at"]),
            materials_returned_at=parse_dt(row["materials_returned_at"]),
            completed_at=parse_dt(row["completed_at"]),
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
        )
