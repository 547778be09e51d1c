"""
Stock ledger primitives that run on a connection already inside a write
transaction.

The ledger store, the fulfillment store and the purchase store all move stock.
They share these helpers so that a consumption record or a purchase row
commits in the same transaction as the movement it caused.
"""

from datetime import UTC, datetime

import aiosqlite

from artstock.core.entities.stock import (
    AppliedMovement,
    MaterialMovement,
    MovementReference,
    MovementType,
    ReferenceKind,
    Stock,
)
from artstock.core.exceptions import MaterialNotFoundError


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_dt(value: str | None) -> datetime | None:
    """Parse a stored ISO timestamp, tolerating empty or malformed values."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


async def ensure_material(conn: aiosqlite.Connection, material_id: str) -> None:
    """Raise MaterialNotFoundError unless the material exists."""
    cursor = await conn.execute("SELECT 1 FROM materials WHERE id = ?", (material_id,))
    if await cursor.fetchone() is None:
        raise MaterialNotFoundError(material_id)


async def read_quantity(conn: aiosqlite.Connection, material_id: str) -> float | None:
    """Current stock quantity, or None if the material has no stock row."""
    cursor = await conn.execute(
        "SELECT quantity FROM stocks WHERE material_id = ?", (material_id,)
    )
    row = await cursor.fetchone()
    return float(row["quantity"]) if row is not None else None


async def _write_quantity(
    conn: aiosqlite.Connection, material_id: str, quantity: float, now: datetime
) -> None:
    await conn.execute(
        """
        INSERT INTO stocks (material_id, quantity, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(material_id) DO UPDATE SET
            quantity = excluded.quantity,
            updated_at = excluded.updated_at
        """,
        (material_id, quantity, now.isoformat()),
    )


async def _append(
    conn: aiosqlite.Connection, movement: MaterialMovement
) -> MaterialMovement:
    reference = movement.reference
    cursor = await conn.execute(
        """
        INSERT INTO material_movements (
            material_id, movement_type, quantity, delta, reason,
            reference_id, reference_kind, notes, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            movement.material_id,
            movement.movement_type.value,
            movement.quantity,
            movement.delta,
            movement.reason,
            reference.entity_id if reference else None,
            reference.kind.value if reference else None,
            movement.notes,
            movement.created_at.isoformat(),
        ),
    )
    movement.id = cursor.lastrowid
    return movement


async def apply_movement(
    conn: aiosqlite.Connection,
    material_id: str,
    movement_type: MovementType,
    quantity: float,
    reason: str,
    reference: MovementReference | None = None,
    notes: str | None = None,
) -> AppliedMovement:
    """
    Apply an IN or OUT of ``quantity`` and append its movement.

    Must be called inside a write transaction. OUT may take the quantity below
    zero.
    """
    if movement_type is MovementType.ADJUSTMENT:
        raise ValueError("adjustments go through set_quantity")

    await ensure_material(conn, material_id)
    now = utcnow()
    old_quantity = await read_quantity(conn, material_id) or 0.0
    delta = quantity if movement_type is MovementType.IN else -quantity
    new_quantity = old_quantity + delta

    await _write_quantity(conn, material_id, new_quantity, now)
    movement = await _append(
        conn,
        MaterialMovement(
            material_id=material_id,
            movement_type=movement_type,
            quantity=quantity,
            delta=delta,
            reason=reason,
            reference=reference,
            notes=notes,
            created_at=now,
        ),
    )
    return AppliedMovement(
        old_quantity=old_quantity, new_quantity=new_quantity, movement=movement
    )


async def set_quantity(
    conn: aiosqlite.Connection,
    material_id: str,
    new_quantity: float,
    reason: str,
    notes: str | None = None,
) -> AppliedMovement:
    """
    Set an exact quantity and append one ADJUSTMENT of magnitude |delta|.

    Without explicit notes the movement records "Adjusted from <old> to <new>".
    """
    await ensure_material(conn, material_id)
    now = utcnow()
    old_quantity = await read_quantity(conn, material_id) or 0.0
    delta = new_quantity - old_quantity
    if notes is None:
        notes = f"Adjusted from {old_quantity:g} to {new_quantity:g}"

    await _write_quantity(conn, material_id, new_quantity, now)
    movement = await _append(
        conn,
        MaterialMovement(
            material_id=material_id,
            movement_type=MovementType.ADJUSTMENT,
            quantity=abs(delta),
            delta=delta,
            reason=reason,
            reference=MovementReference(entity_id=material_id, kind=ReferenceKind.MANUAL),
            notes=notes,
            created_at=now,
        ),
    )
    return AppliedMovement(
        old_quantity=old_quantity, new_quantity=new_quantity, movement=movement
    )


def row_to_movement(row: aiosqlite.Row) -> MaterialMovement:
    """Convert a database row to a MaterialMovement entity."""
    reference = None
    if row["reference_id"] and row["reference_kind"]:
        reference = MovementReference(
            entity_id=row["reference_id"],
            kind=ReferenceKind(row["reference_kind"]),
        )
    return MaterialMovement(
        id=row["id"],
        material_id=row["material_id"],
        movement_type=MovementType(row["movement_type"]),
        quantity=float(row["quantity"]),
        delta=float(row["delta"]),
        reason=row["reason"],
        reference=reference,
        notes=row["notes"],
        created_at=parse_dt(row["created_at"]) or utcnow(),
    )


def row_to_stock(row: aiosqlite.Row) -> Stock:
    """Convert a database row to a Stock entity."""
    return Stock(
        id=row["id"],
        material_id=row["material_id"],
        quantity=float(row["quantity"]),
        min_level=float(row["min_level"]) if row["min_level"] is not None else None,
        updated_at=parse_dt(row["updated_at"]) or utcnow(),
    )
