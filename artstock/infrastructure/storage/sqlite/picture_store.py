"""
SQLite implementation of picture storage.

Handles picture sizes, both picture variants (stored in one table with
variant-specific nullable columns) and bill-of-materials lines.
"""

import uuid

import aiosqlite

from artstock.config import get_logger
from artstock.core.entities.picture import (
    CustomPhotoPicture,
    PictureMaterial,
    PictureSize,
    PictureType,
    ReadyMadePicture,
    parse_picture,
)
from artstock.core.interfaces.picture_store import AnyPicture, IPictureStore
from artstock.infrastructure.storage.sqlite.connection import ConnectionPool
from artstock.infrastructure.storage.sqlite.ledger_ops import parse_dt, utcnow

logger = get_logger(__name__)


def _generate_id() -> str:
    return str(uuid.uuid4())


class SQLitePictureStore(IPictureStore):
    """SQLite implementation of picture and bill-of-materials storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    # Sizes

    async def create_size(self, size: PictureSize) -> PictureSize:
        if not size.id:
            size.id = _generate_id()
        async with self._pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO picture_sizes (id, name, width_cm, height_cm) VALUES (?, ?, ?, ?)",
                (size.id, size.name, size.width_cm, size.height_cm),
            )
        logger.info("picture_size_created", size_id=size.id, name=size.name)
        return size

    async def get_size(self, size_id: str) -> PictureSize | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM picture_sizes WHERE id = ?", (size_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return PictureSize(
                id=row["id"],
                name=row["name"],
                width_cm=float(row["width_cm"]),
                height_cm=float(row["height_cm"]),
            )

    # Pictures

    async def create_picture(self, picture: AnyPicture) -> AnyPicture:
        """Create a picture of either variant."""
        if not picture.id:
            picture.id = _generate_id()
        picture.updated_at = utcnow()

        source_picture_id = image_url = photo_url = None
        if isinstance(picture, ReadyMadePicture):
            source_picture_id = picture.source_picture_id
            image_url = picture.image_url
        elif isinstance(picture, CustomPhotoPicture):
            photo_url = picture.photo_url

        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO pictures (
                    id, type, name, picture_size_id, order_id, description,
                    price, cost_price, work_hours, is_active,
                    source_picture_id, image_url, photo_url,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    picture.id,
                    picture.type.value,
                    picture.name,
                    picture.picture_size_id,
                    picture.order_id,
                    picture.description,
                    picture.price,
                    picture.cost_price,
                    picture.work_hours,
                    int(picture.is_active),
                    source_picture_id,
                    image_url,
                    photo_url,
                    picture.created_at.isoformat(),
                    picture.updated_at.isoformat(),
                ),
            )
        logger.info(
            "picture_created",
            picture_id=picture.id,
            type=picture.type.value,
            order_id=picture.order_id,
        )
        return picture

    async def get_picture(self, picture_id: str) -> AnyPicture | None:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM pictures WHERE id = ?", (picture_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_picture(row) if row else None

    async def list_pictures(
        self,
        material_id: str | None = None,
        picture_type: PictureType | None = None,
        active_only: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AnyPicture]:
        conditions = []
        params: list = []
        if material_id:
            conditions.append(
                "id IN (SELECT picture_id FROM picture_materials WHERE material_id = ?)"
            )
            params.append(material_id)
        if picture_type is not None:
            conditions.append("type = ?")
            params.append(picture_type.value)
        if active_only:
            conditions.append("is_active = 1")
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        # SQLite treats a negative LIMIT as unbounded
        params.extend([limit if limit is not None else -1, offset])
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM pictures
                {where}
                ORDER BY created_at, id
                LIMIT ? OFFSET ?
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_picture(row) for row in rows]

    async def list_order_pictures(self, order_id: str) -> list[AnyPicture]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM pictures WHERE order_id = ? ORDER BY created_at, id",
                (order_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_picture(row) for row in rows]

    async def update_costing(
        self,
        picture_id: str,
        cost_price: float | None = None,
        price: float | None = None,
    ) -> None:
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                UPDATE pictures SET
                    cost_price = COALESCE(?, cost_price),
                    price = COALESCE(?, price),
                    updated_at = ?
                WHERE id = ?
                """,
                (cost_price, price, utcnow().isoformat(), picture_id),
            )
        logger.debug(
            "picture_costing_updated",
            picture_id=picture_id,
            cost_price=cost_price,
            price=price,
        )

    async def update_size(self, picture_id: str, picture_size_id: str) -> None:
        async with self._pool.transaction() as conn:
            await conn.execute(
                "UPDATE pictures SET picture_size_id = ?, updated_at = ? WHERE id = ?",
                (picture_size_id, utcnow().isoformat(), picture_id),
            )
        logger.info("picture_size_changed", picture_id=picture_id, picture_size_id=picture_size_id)

    async def delete_picture(self, picture_id: str) -> bool:
        async with self._pool.transaction() as conn:
            cursor = await conn.execute("DELETE FROM pictures WHERE id = ?", (picture_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("picture_deleted", picture_id=picture_id)
        return deleted

    # Bill of materials

    async def get_bill_of_materials(self, picture_id: str) -> list[PictureMaterial]:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM picture_materials WHERE picture_id = ? ORDER BY id",
                (picture_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_line(row) for row in rows]

    async def replace_bill_of_materials(
        self, picture_id: str, lines: list[PictureMaterial]
    ) -> list[PictureMaterial]:
        async with self._pool.transaction() as conn:
            await conn.execute(
                "DELETE FROM picture_materials WHERE picture_id = ?", (picture_id,)
            )
            stored = []
            for line in lines:
                cursor = await conn.execute(
                    """
                    INSERT INTO picture_materials (picture_id, material_id, quantity)
                    VALUES (?, ?, ?)
                    """,
                    (picture_id, line.material_id, line.quantity),
                )
                stored.append(
                    PictureMaterial(
                        id=cursor.lastrowid,
                        picture_id=picture_id,
                        material_id=line.material_id,
                        quantity=line.quantity,
                    )
                )
        logger.info("bill_of_materials_replaced", picture_id=picture_id, lines=len(stored))
        return stored

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> PictureMaterial:
        return PictureMaterial(
            id=row["id"],
            picture_id=row["picture_id"],
            material_id=row["material_id"],
            quantity=float(row["quantity"]),
        )

    @staticmethod
    def _row_to_picture(row: aiosqlite.Row) -> AnyPicture:
        """Convert a database row to the matching picture variant."""
        data = {
            "id": row["id"],
            "type": row["type"],
            "name": row["name"],
            "picture_size_id": row["picture_size_id"],
            "order_id": row["order_id"],
            "description": row["description"],
            "price": float(row["price"]),
            "cost_price": float(row["cost_price"]) if row["cost_price"] is not None else None,
            "work_hours": float(row["work_hours"]),
            "is_active": bool(row["is_active"]),
            "created_at": parse_dt(row["created_at"]) or utcnow(),
            "updated_at": parse_dt(row["updated_at"]) or utcnow(),
        }
        if row["type"] == PictureType.READY_MADE.value:
            data["source_picture_id"] = row["source_picture_id"]
            data["image_url"] = row["image_url"]
        else:
            data["photo_url"] = row["photo_url"]
        return parse_picture(data)
