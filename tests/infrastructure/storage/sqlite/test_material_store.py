"""Tests for SQLiteMaterialStore."""

import pytest

from artstock.core.entities.material import Material, MaterialCategory
from artstock.infrastructure.storage.sqlite import ConnectionPool, SQLiteMaterialStore


@pytest.fixture
def store(pool: ConnectionPool) -> SQLiteMaterialStore:
    return SQLiteMaterialStore(pool)


class TestMaterialStore:
    async def test_create_assigns_id_and_reads_back(self, store):
        created = await store.create_material(
            Material(name="Cotton canvas", unit="m2", category=MaterialCategory.CANVAS)
        )

        assert created.id
        loaded = await store.get_material(created.id)
        assert loaded.name == "Cotton canvas"
        assert loaded.unit == "m2"
        assert loaded.category is MaterialCategory.CANVAS
        assert loaded.is_active is True

    async def test_get_unknown_returns_none(self, store):
        assert await store.get_material("missing") is None

    async def test_list_filters(self, store):
        await store.create_material(Material(name="B paint", category=MaterialCategory.PAINT))
        await store.create_material(Material(name="A canvas", category=MaterialCategory.CANVAS))
        brush = await store.create_material(
            Material(name="C brush", category=MaterialCategory.BRUSH)
        )
        await store.deactivate_material(brush.id)

        everything = await store.list_materials()
        assert [m.name for m in everything] == ["A canvas", "B paint", "C brush"]

        active = await store.list_materials(active_only=True)
        assert "C brush" not in [m.name for m in active]

        paints = await store.list_materials(category=MaterialCategory.PAINT)
        assert [m.name for m in paints] == ["B paint"]

    async def test_first_active_by_category_skips_inactive(self, store):
        first = await store.create_material(
            Material(name="Old frame", category=MaterialCategory.FRAME)
        )
        second = await store.create_material(
            Material(name="New frame", category=MaterialCategory.FRAME)
        )

        assert (await store.first_active_by_category(MaterialCategory.FRAME)).id == first.id

        await store.deactivate_material(first.id)
        assert (await store.first_active_by_category(MaterialCategory.FRAME)).id == second.id

    async def test_first_active_none_for_empty_category(self, store):
        assert await store.first_active_by_category(MaterialCategory.VARNISH) is None

    async def test_deactivate_unknown(self, store):
        assert await store.deactivate_material("missing") is False
