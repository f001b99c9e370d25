"""Import instance rows written by the previous server into the instances table.

The previous server stored rows in a differently named table and, depending on
the release, used either ``tenders``/``last_tender`` or
``caretakers``/``last_caretaker`` for the caretaker columns. This script copies
those rows into ``instances`` using the canonical ``caretakers``/``last_tender``
columns.

The migration is idempotent - rows whose sync_id already exists are skipped.
"""

import argparse
import asyncio
import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.core import schema
from src.core.config import settings


logger = logging.getLogger(__name__)


async def create_backup(*, db_path: Path) -> Path:
    """Create a backup of the database before migration."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.parent / f"{db_path.stem}_backup_{timestamp}{db_path.suffix}"
    shutil.copy2(db_path, backup_path)
    logger.info("Created backup at: %s", backup_path)
    return backup_path


async def drop_legacy_table(conn: aiosqlite.Connection, *, legacy_table: str, confirm: bool = False) -> None:
    """Drop the legacy table after import (requires confirmation)."""
    if not confirm:
        logger.info("Skipping table drop (use --drop-legacy-table to confirm)")
        return

    if await schema.table_exists(conn, legacy_table):
        await conn.execute(f"DROP TABLE IF EXISTS {legacy_table}")
        await conn.commit()
        logger.info("Dropped legacy table: %s", legacy_table)


async def run_migration(*, db_path: Path, legacy_table: str, should_drop_legacy_table: bool = False) -> dict[str, int]:
    """Run the complete legacy import."""
    logger.info("Starting legacy import on database: %s", db_path)

    backup_path = await create_backup(db_path=db_path)

    async with aiosqlite.connect(str(db_path)) as conn:
        await schema.init_db(conn)

        results: dict[str, int] = {}
        results["instances_imported"] = await schema.import_legacy_table(conn, legacy_table)

        await drop_legacy_table(conn, legacy_table=legacy_table, confirm=should_drop_legacy_table)

        logger.info("Migration complete. Total rows imported: %d", results["instances_imported"])
        logger.info("Backup saved at: %s", backup_path)

        return results


async def verify_migration(*, db_path: Path, legacy_table: str) -> bool:
    """Verify every legacy sync_id has a row in the instances table."""
    async with aiosqlite.connect(str(db_path)) as conn:
        if not await schema.table_exists(conn, legacy_table):
            logger.info("Legacy table %s not present", legacy_table)
            return True

        if not await schema.table_exists(conn, schema.TABLE_NAME):
            logger.info("Table %s not present, nothing imported yet", schema.TABLE_NAME)
            return False

        cursor = await conn.execute(
            f"SELECT COUNT(*) FROM {legacy_table} "  # noqa: S608 - table confirmed to exist above
            f"WHERE sync_id NOT IN (SELECT sync_id FROM {schema.TABLE_NAME})"
        )
        row = await cursor.fetchone()
        missing = row[0] if row else 0

        logger.info("Verification:")
        logger.info("  - Legacy rows without an instance: %d", missing)

        return missing == 0


def main() -> None:
    """Main entry point for the migration script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Import legacy instance rows into the instances table")
    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="Path to database file (default: uses settings.sqlite_db_path)",
    )
    parser.add_argument(
        "--legacy-table",
        type=str,
        default=None,
        help="Name of the legacy table (default: uses settings.legacy_table_name)",
    )
    parser.add_argument(
        "--drop-legacy-table",
        action="store_true",
        help="Drop the legacy table after import (confirmation required)",
    )
    parser.add_argument(
        "--verify-only",
        action="store_true",
        help="Only verify migration status without running migration",
    )

    args = parser.parse_args()

    db_path = Path(args.db_path).resolve() if args.db_path else Path(settings.sqlite_db_path).resolve()
    legacy_table = args.legacy_table or settings.legacy_table_name

    if not db_path.exists():
        logger.error("Database file not found: %s", db_path)
        sys.exit(1)

    if args.verify_only:
        success = asyncio.run(verify_migration(db_path=db_path, legacy_table=legacy_table))
        if success:
            logger.info("✓ Migration verified successfully")
        else:
            logger.error("✗ Migration verification failed")
            sys.exit(1)
    else:
        results = asyncio.run(
            run_migration(
                db_path=db_path,
                legacy_table=legacy_table,
                should_drop_legacy_table=args.drop_legacy_table,
            )
        )
        logger.info("Migration Summary:")
        for key, value in results.items():
            logger.info("  %s: %s", key, value)


if __name__ == "__main__":
    main()
