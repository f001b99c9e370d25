"""SQLite schema for instance rows (code-first, additive migrations)."""

import logging
import re

import aiosqlite

from src.core.config import constants


logger = logging.getLogger(__name__)


TABLE_NAME = "instances"

# Every column the current code reads or writes, in declaration order.
COLUMNS: dict[str, str] = {
    "sync_id": "TEXT PRIMARY KEY",
    "schema_version": f"INTEGER NOT NULL DEFAULT {constants.SCHEMA_VERSION}",
    "caretakers": "TEXT DEFAULT '[]'",
    "chores": "TEXT DEFAULT '[]'",
    "tending_log": "TEXT DEFAULT '[]'",
    "last_tended_timestamp": "INTEGER",
    "last_tender": "TEXT",
}

# Columns written by earlier servers, mapped to their canonical replacement.
LEGACY_COLUMNS: dict[str, str] = {
    "tenders": "caretakers",
    "last_caretaker": "last_tender",
}


def _validate_table_name(table: str) -> None:
    """Validate that a table name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", table):
        msg = f"Invalid table name: {table}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


async def table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    """Check if a table exists in the database."""
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table_name,))
    return await cursor.fetchone() is not None


async def get_columns(conn: aiosqlite.Connection, table_name: str) -> list[str]:
    """Return the column names of a table."""
    _validate_table_name(table_name)
    cursor = await conn.execute(f"PRAGMA table_info({table_name})")
    rows = await cursor.fetchall()
    return [row[1] for row in rows]


async def _add_missing_columns(conn: aiosqlite.Connection, existing: list[str]) -> list[str]:
    added = []
    for name, declaration in COLUMNS.items():
        if name in existing or name == "sync_id":
            continue
        await conn.execute(f"ALTER TABLE {TABLE_NAME} ADD COLUMN {name} {declaration}")
        added.append(name)
    return added


async def _migrate_legacy_columns(conn: aiosqlite.Connection, existing: list[str]) -> list[str]:
    """Copy legacy column values into canonical columns, then blank the legacy ones."""
    migrated = []
    for legacy, canonical in LEGACY_COLUMNS.items():
        if legacy not in existing:
            continue
        await conn.execute(
            f"UPDATE {TABLE_NAME} SET {canonical} = {legacy} "  # noqa: S608 - names are module constants
            f"WHERE ({canonical} IS NULL OR {canonical} IN ('', '[]')) "
            f"AND {legacy} IS NOT NULL AND {legacy} NOT IN ('', '[]')"
        )
        await conn.execute(f"UPDATE {TABLE_NAME} SET {legacy} = NULL")  # noqa: S608
        migrated.append(legacy)
    return migrated


async def init_db(conn: aiosqlite.Connection) -> None:
    """Create the instances table and bring an existing one up to date (idempotent)."""
    column_sql = ", ".join(f"{name} {declaration}" for name, declaration in COLUMNS.items())
    await conn.execute(f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} ({column_sql})")

    existing = await get_columns(conn, TABLE_NAME)
    added = await _add_missing_columns(conn, existing)
    migrated = await _migrate_legacy_columns(conn, existing)
    await conn.commit()

    if added or migrated:
        logger.info("Upgraded %s table", TABLE_NAME, extra={"added": added, "migrated": migrated})
    else:
        logger.info("Table %s schema is already up to date", TABLE_NAME)


async def import_legacy_table(conn: aiosqlite.Connection, legacy_table: str) -> int:
    """Copy rows from a table written by an earlier server into the instances table.

    Rows whose sync_id already exists are left untouched, so re-running is safe.

    Returns:
        Number of rows inserted.
    """
    _validate_table_name(legacy_table)
    if not await table_exists(conn, legacy_table):
        logger.warning("Legacy table %s does not exist, nothing to import", legacy_table)
        return 0

    legacy_columns = await get_columns(conn, legacy_table)
    targets = [name for name in COLUMNS if name not in ("sync_id", "schema_version")]

    select_exprs = []
    for target in targets:
        sources = [target, *(legacy for legacy, canonical in LEGACY_COLUMNS.items() if canonical == target)]
        present = [source for source in sources if source in legacy_columns]
        if not present:
            select_exprs.append("NULL")
        elif len(present) == 1:
            select_exprs.append(present[0])
        else:
            select_exprs.append(f"COALESCE({', '.join(present)})")

    query = (
        f"INSERT OR IGNORE INTO {TABLE_NAME} (sync_id, schema_version, {', '.join(targets)}) "  # noqa: S608
        f"SELECT sync_id, ?, {', '.join(select_exprs)} FROM {legacy_table}"
    )
    cursor = await conn.execute(query, (constants.SCHEMA_VERSION,))
    await conn.commit()

    imported = max(cursor.rowcount, 0)
    logger.info("Imported %d rows from %s", imported, legacy_table)
    return imported
