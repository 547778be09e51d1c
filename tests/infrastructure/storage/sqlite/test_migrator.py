"""Unit tests for database migrator."""

from pathlib import Path

import aiosqlite
import pytest

from artstock.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        """from_file() parses version and name from filename."""
        migration_file = tmp_path / "v002_add_suppliers.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "002"
        assert info.name == "add_suppliers"
        assert len(info.checksum) == 16

    def test_checksum_follows_content(self, tmp_path: Path):
        first = tmp_path / "v001_a.sql"
        second = tmp_path / "v002_a.sql"
        first.write_text("SELECT 1;")
        second.write_text("SELECT 2;")

        assert MigrationInfo.from_file(first).checksum != MigrationInfo.from_file(second).checksum

    def test_invalid_filename_raises(self, tmp_path: Path):
        bad = tmp_path / "initial.sql"
        bad.write_text("SELECT 1;")
        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(bad)


class TestDiscoverMigrations:
    def test_sorted_and_skips_invalid(self, tmp_path: Path):
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "vXYZ_broken.sql").write_text("SELECT 3;")

        migrations = discover_migrations(tmp_path)

        assert [m.version for m in migrations] == ["001", "002"]

    def test_ships_initial_migration(self):
        assert discover_migrations()[0].version == "001"


class TestBackup:
    def test_create_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        db_path.write_bytes(b"original")

        backup_path = create_backup(db_path)
        assert backup_path.exists()
        assert "backup_" in backup_path.name

        db_path.write_bytes(b"changed")
        restore_backup(db_path, backup_path)
        assert db_path.read_bytes() == b"original"


class TestInitializeDatabase:
    async def test_applies_initial_schema(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.success for r in results] == [True]
        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= tables

    async def test_second_run_is_noop(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        assert await initialize_database(temp_db_path, create_backup_before=False) == []

    async def test_backup_removed_after_success(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        await initialize_database(temp_db_path)

        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_records_applied_versions(self, migrated_db: Path):
        async with aiosqlite.connect(migrated_db) as conn:
            applied = await get_applied_migrations(conn)
        assert "001" in applied

    async def test_no_table_means_nothing_applied(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_applied_migrations(conn) == {}


class TestMigrationStatus:
    async def test_missing_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "absent.db")
        assert status["exists"] is False
        assert status["current_version"] is None

    async def test_migrated_database(self, migrated_db: Path):
        status = await get_migration_status(migrated_db)
        assert status["exists"] is True
        assert status["current_version"] == "001"
        assert status["pending_migrations"] == []


class TestVerifySchemaIntegrity:
    """Tests for verify_schema_integrity()."""

    async def test_fresh_database_passes(self, migrated_db: Path):
        checks = {c["check"]: c for c in await verify_schema_integrity(migrated_db)}

        assert checks["foreign_keys"]["status"] == "PASS"
        assert checks["integrity"]["status"] == "PASS"
        assert checks["required_tables"]["status"] == "PASS"
        assert checks["ledger_balance"]["status"] == "PASS"

    async def test_detects_stock_drift(self, migrated_db: Path):
        async with aiosqlite.connect(migrated_db) as conn:
            await conn.execute(
                "INSERT INTO materials (id, name, created_at, updated_at) "
                "VALUES ('M1', 'Canvas', '2024-01-01', '2024-01-01')"
            )
            await conn.execute(
                "INSERT INTO stocks (material_id, quantity, updated_at) "
                "VALUES ('M1', 5, '2024-01-01')"
            )
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(migrated_db)}

        assert checks["ledger_balance"]["status"] == "FAIL"
        assert checks["ledger_balance"]["unbalanced_materials"] == ["M1"]

    async def test_large_quantities_tolerate_float_drift(self, migrated_db: Path):
        async with aiosqlite.connect(migrated_db) as conn:
            await conn.execute(
                "INSERT INTO materials (id, name, created_at, updated_at) "
                "VALUES ('M1', 'Pigment', '2024-01-01', '2024-01-01')"
            )
            await conn.execute(
                "INSERT INTO stocks (material_id, quantity, updated_at) "
                "VALUES ('M1', 1000000000000.001, '2024-01-01')"
            )
            await conn.execute(
                "INSERT INTO material_movements "
                "(material_id, movement_type, quantity, delta, reason, created_at) "
                "VALUES ('M1', 'IN', 1000000000000, 1000000000000, 'Opening stock', '2024-01-01')"
            )
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(migrated_db)}

        assert checks["ledger_balance"]["status"] == "PASS"
