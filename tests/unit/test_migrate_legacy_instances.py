"""Tests for the legacy instance import script."""

import json

import aiosqlite
import pytest

from scripts.migrate_legacy_instances import run_migration, verify_migration
from src.core import schema


@pytest.fixture
async def legacy_db(tmp_path):
    """Provides a database file holding only a legacy table."""
    db_path = tmp_path / "legacy.db"
    async with aiosqlite.connect(str(db_path)) as conn:
        await conn.execute(
            "CREATE TABLE shitty_instances (sync_id TEXT PRIMARY KEY, tenders TEXT, chores TEXT, "
            "tending_log TEXT, last_tended_timestamp INTEGER, last_tender TEXT)"
        )
        await conn.execute(
            "INSERT INTO shitty_instances VALUES (?, ?, ?, ?, ?, ?)",
            ("house-a", json.dumps([{"id": "c_1_aaaaa", "name": "Alice"}]), "[]", "[]", None, None),
        )
        await conn.commit()
    return db_path


@pytest.mark.unit
class TestRunMigration:
    """Tests for run_migration and verify_migration."""

    async def test_imports_rows_and_writes_backup(self, legacy_db):
        assert not await verify_migration(db_path=legacy_db, legacy_table="shitty_instances")

        results = await run_migration(db_path=legacy_db, legacy_table="shitty_instances")

        assert results == {"instances_imported": 1}
        assert list(legacy_db.parent.glob("legacy_backup_*.db"))
        assert await verify_migration(db_path=legacy_db, legacy_table="shitty_instances")

    async def test_rerun_imports_nothing(self, legacy_db):
        await run_migration(db_path=legacy_db, legacy_table="shitty_instances")

        results = await run_migration(db_path=legacy_db, legacy_table="shitty_instances")

        assert results == {"instances_imported": 0}

    async def test_drop_legacy_table(self, legacy_db):
        await run_migration(db_path=legacy_db, legacy_table="shitty_instances", should_drop_legacy_table=True)

        async with aiosqlite.connect(str(legacy_db)) as conn:
            assert not await schema.table_exists(conn, "shitty_instances")
            assert await schema.table_exists(conn, schema.TABLE_NAME)
