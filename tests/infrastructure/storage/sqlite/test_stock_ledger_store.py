"""Tests for SQLiteStockLedgerStore."""

from datetime import UTC, datetime, timedelta

import pytest

from artstock.core.entities.material import Material
from artstock.core.entities.stock import MovementReference, MovementType, ReferenceKind
from artstock.core.exceptions import MaterialNotFoundError
from artstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteMaterialStore,
    SQLiteStockLedgerStore,
)


@pytest.fixture
def store(pool: ConnectionPool) -> SQLiteStockLedgerStore:
    return SQLiteStockLedgerStore(pool)


@pytest.fixture
async def material(pool: ConnectionPool) -> Material:
    return await SQLiteMaterialStore(pool).create_material(Material(name="Canvas"))


class TestApplyMovement:
    async def test_first_in_creates_stock_row(self, store, material):
        applied = await store.apply_movement(material.id, MovementType.IN, 50, "Delivery")

        assert applied.old_quantity == 0
        assert applied.new_quantity == 50
        assert applied.movement.id is not None
        assert applied.movement.delta == 50
        assert (await store.get_stock(material.id)).quantity == 50

    async def test_out_may_go_negative(self, store, material):
        await store.apply_movement(material.id, MovementType.IN, 5, "Delivery")
        applied = await store.apply_movement(material.id, MovementType.OUT, 8, "Use")

        assert applied.new_quantity == -3
        assert applied.movement.quantity == 8
        assert applied.movement.delta == -8

    async def test_reference_persisted(self, store, material):
        reference = MovementReference(entity_id="ORD-1", kind=ReferenceKind.ORDER)
        await store.apply_movement(
            material.id, MovementType.OUT, 1, "Use", reference=reference, notes="picture X"
        )

        [movement] = await store.list_movements(material.id)
        assert movement.reference == reference
        assert movement.notes == "picture X"

    async def test_unknown_material_leaves_no_trace(self, store):
        with pytest.raises(MaterialNotFoundError):
            await store.apply_movement("missing", MovementType.IN, 1, "Delivery")
        assert await store.list_movements() == []

    async def test_adjustment_rejected(self, store, material):
        with pytest.raises(ValueError):
            await store.apply_movement(material.id, MovementType.ADJUSTMENT, 1, "Fix")


class TestSetQuantity:
    async def test_adjustment_records_magnitude_and_delta(self, store, material):
        await store.apply_movement(material.id, MovementType.OUT, 20, "Use")

        applied = await store.set_quantity(material.id, 10, "Stocktake")

        assert applied.old_quantity == -20
        assert applied.movement.movement_type is MovementType.ADJUSTMENT
        assert applied.movement.quantity == 30
        assert applied.movement.delta == 30
        assert applied.movement.notes == "Adjusted from -20 to 10"
        assert applied.movement.reference.kind is ReferenceKind.MANUAL

    async def test_explicit_notes_kept(self, store, material):
        applied = await store.set_quantity(material.id, 3, "Stocktake", notes="shelf B")
        assert applied.movement.notes == "shelf B"


class TestQueries:
    async def test_movements_newest_first_with_paging(self, store, material):
        for qty in (1, 2, 3):
            await store.apply_movement(material.id, MovementType.IN, qty, "Delivery")

        movements = await store.list_movements(material.id, limit=2)
        assert [m.quantity for m in movements] == [3, 2]
        assert [m.quantity for m in await store.list_movements(limit=2, offset=2)] == [1]

    async def test_min_level_and_low_stock(self, store, material):
        stock = await store.set_min_level(material.id, 10)
        assert stock.quantity == 0
        assert stock.is_low

        await store.apply_movement(material.id, MovementType.IN, 5, "Delivery")
        assert [s.material_id for s in await store.list_low_stock()] == [material.id]

        await store.apply_movement(material.id, MovementType.IN, 20, "Delivery")
        assert await store.list_low_stock() == []

    async def test_min_level_unknown_material(self, store):
        with pytest.raises(MaterialNotFoundError):
            await store.set_min_level("missing", 1)

    async def test_stats(self, store, material):
        await store.apply_movement(material.id, MovementType.IN, 7, "Delivery")
        await store.set_min_level(material.id, 10)

        stats = await store.get_stats(datetime.now(UTC) - timedelta(days=1))

        assert stats == {
            "material_count": 1,
            "low_stock_count": 1,
            "total_quantity": 7.0,
            "movements_in_window": 1,
        }

    async def test_ledger_totals_match_stock(self, store, material):
        await store.apply_movement(material.id, MovementType.IN, 50, "Delivery")
        await store.apply_movement(material.id, MovementType.OUT, 70, "Use")
        await store.set_quantity(material.id, 10, "Stocktake")

        total, count = await store.ledger_totals(material.id)

        assert total == pytest.approx(10)
        assert count == 3
        assert (await store.get_stock(material.id)).quantity == pytest.approx(total)
