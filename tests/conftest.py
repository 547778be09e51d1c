"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from artstock.api.dependencies import get_container
from artstock.api.main import app
from artstock.application.services import ServiceContainer, build_services, reset_services
from artstock.config import get_settings, reset_settings
from artstock.core.entities.material import Material, MaterialCategory
from artstock.core.entities.picture import PictureSize
from artstock.infrastructure.storage.sqlite import ConnectionPool
from artstock.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a throwaway data dir for every test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "5000")
    reset_settings()
    reset_services()
    yield
    reset_services()
    reset_settings()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the migrated temporary database."""
    pool = ConnectionPool(migrated_db, pool_size=5, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def services(pool: ConnectionPool) -> ServiceContainer:
    """Every store and service wired over the temporary database."""
    return build_services(pool, get_settings())


@pytest.fixture
async def standard_materials(services: ServiceContainer) -> dict[MaterialCategory, Material]:
    """One active material per standard bill-of-materials category."""
    created = {}
    for category, name, unit in [
        (MaterialCategory.CANVAS, "Cotton canvas", "m2"),
        (MaterialCategory.FRAME, "Pine stretcher frame", "m"),
        (MaterialCategory.PAINT, "Acrylic paint set", "tube"),
        (MaterialCategory.BRUSH, "Synthetic brush", "pcs"),
    ]:
        created[category] = await services.material_store.create_material(
            Material(name=name, unit=unit, category=category)
        )
    return created


@pytest.fixture
async def size_30x40(services: ServiceContainer) -> PictureSize:
    return await services.picture_store.create_size(
        PictureSize(name="30x40", width_cm=30, height_cm=40)
    )


@pytest.fixture
async def api_client(services: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, wired to the temporary database."""
    app.dependency_overrides[get_container] = lambda: services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_container, None)
