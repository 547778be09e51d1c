"""Tests for SQLiteOrderStore."""

import asyncio
from datetime import UTC, date, datetime, timedelta

import pytest

from artstock.core.entities.order import Order, OrderStatus
from artstock.core.exceptions import ConcurrencyConflict, OrderNotFoundError
from artstock.infrastructure.storage.sqlite import ConnectionPool, SQLiteOrderStore


@pytest.fixture
def store(pool: ConnectionPool) -> SQLiteOrderStore:
    return SQLiteOrderStore(pool)


def _order(number: str = "ART-2024-01-01-001") -> Order:
    return Order(order_number=number, customer_name="Ada")


class TestOrders:
    async def test_create_and_get(self, store):
        created = await store.create_order(_order())

        loaded = await store.get_order(created.id)
        assert loaded.order_number == "ART-2024-01-01-001"
        assert loaded.status is OrderStatus.PENDING
        assert (await store.get_by_number("ART-2024-01-01-001")).id == created.id

    async def test_duplicate_number_is_conflict(self, store):
        await store.create_order(_order())
        with pytest.raises(ConcurrencyConflict):
            await store.create_order(_order())

    async def test_update_status(self, store):
        order = await store.create_order(_order())
        finished = datetime(2024, 1, 2, tzinfo=UTC)

        updated = await store.update_status(order.id, OrderStatus.COMPLETED, finished)
        assert updated.status is OrderStatus.COMPLETED
        assert updated.completed_at == finished

        again = await store.update_status(order.id, OrderStatus.DELIVERED)
        assert again.completed_at == finished

    async def test_update_status_unknown_order(self, store):
        with pytest.raises(OrderNotFoundError):
            await store.update_status("missing", OrderStatus.COMPLETED)

    async def test_update_status_checks_expected_status(self, store):
        order = await store.create_order(_order())
        await store.update_status(order.id, OrderStatus.CANCELLED)

        with pytest.raises(ConcurrencyConflict):
            await store.update_status(
                order.id, OrderStatus.IN_PROGRESS, expected_status=OrderStatus.PENDING
            )

        assert (await store.get_order(order.id)).status is OrderStatus.CANCELLED

    async def test_update_status_with_matching_expected_status(self, store):
        order = await store.create_order(_order())

        updated = await store.update_status(
            order.id, OrderStatus.IN_PROGRESS, expected_status=OrderStatus.PENDING
        )

        assert updated.status is OrderStatus.IN_PROGRESS

    async def test_expected_status_on_unknown_order(self, store):
        with pytest.raises(OrderNotFoundError):
            await store.update_status(
                "missing", OrderStatus.IN_PROGRESS, expected_status=OrderStatus.PENDING
            )

    async def test_stamps_and_total(self, store):
        order = await store.create_order(_order())
        at = datetime(2024, 1, 3, tzinfo=UTC)

        await store.mark_materials_consumed(order.id, at)
        await store.mark_materials_returned(order.id, at)
        await store.update_total_price(order.id, 250.5)

        loaded = await store.get_order(order.id)
        assert loaded.materials_consumed_at == at
        assert loaded.materials_returned_at == at
        assert loaded.total_price == 250.5


class TestSequences:
    async def test_sequence_counts_per_prefix_and_day(self, store):
        day = date(2024, 5, 1)
        assert await store.allocate_sequence("ART", day) == 1
        assert await store.allocate_sequence("ART", day) == 2
        assert await store.allocate_sequence("GIFT", day) == 1
        assert await store.allocate_sequence("ART", day + timedelta(days=1)) == 1

    async def test_sequence_seeded_from_existing_orders(self, store):
        await store.create_order(_order("ART-2024-05-01-007"))
        assert await store.allocate_sequence("ART", date(2024, 5, 1)) == 8

    async def test_concurrent_allocations_are_distinct(self, store):
        day = date(2024, 5, 1)
        sequences = await asyncio.gather(*(store.allocate_sequence("ART", day) for _ in range(20)))
        assert sorted(sequences) == list(range(1, 21))

    async def test_number_exists(self, store):
        await store.create_order(_order())
        assert await store.number_exists("ART-2024-01-01-001") is True
        assert await store.number_exists("ART-2024-01-01-002") is False

    async def test_count_by_prefix(self, store):
        await store.create_order(_order("ART-2024-01-01-001"))
        await store.create_order(_order("ART-2024-01-01-002"))
        await store.create_order(_order("GIFT-2024-01-01-001"))

        now = datetime.now(UTC)
        counts = await store.count_numbers_by_prefix(now - timedelta(hours=1), now + timedelta(hours=1))

        assert counts == {"ART": 2, "GIFT": 1}
