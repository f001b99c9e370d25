"""SQLite storage client for instance rows."""

import json
import logging
from pathlib import Path
from typing import Any

import aiosqlite

from src.core import schema
from src.core.config import constants, settings
from src.core.ids import generate_id
from src.domain.instance import Chore, Instance


logger = logging.getLogger(__name__)

MEMORY_DB_PATH = ":memory:"


class DatabaseError(RuntimeError):
    """Raised when the database cannot complete an operation."""


class RecordNotFoundError(DatabaseError):
    """Raised when a row expected to exist is missing."""


def get_db_path(db_path: str | None = None) -> str:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    if path_str == MEMORY_DB_PATH:
        return path_str
    return str(Path(path_str).resolve())


def _load_json(raw: str | None) -> list[Any]:
    """Decode a JSON text column, treating NULL and blank text as an empty list."""
    if raw is None or not raw.strip():
        return []
    return json.loads(raw)


def _dump_json(items: list[Any]) -> str:
    return json.dumps([item.model_dump() for item in items], ensure_ascii=False)


def _default_chores() -> list[Chore]:
    return [
        Chore(
            id=generate_id(constants.CHORE_ID_PREFIX),
            name=constants.DEFAULT_CHORE_NAME,
            icon=constants.DEFAULT_CHORE_ICON,
        )
    ]


def _row_to_instance(row: aiosqlite.Row) -> Instance:
    return Instance.model_validate(
        {
            "schema_version": row["schema_version"] or constants.SCHEMA_VERSION,
            "caretakers": _load_json(row["caretakers"]),
            "chores": _load_json(row["chores"]),
            "tending_log": _load_json(row["tending_log"]),
            "last_tended_timestamp": row["last_tended_timestamp"],
            "last_tender": row["last_tender"],
        }
    )


class InstanceStore:
    """Reads and writes whole instance rows keyed by sync code.

    Every write replaces the full row. Nothing serializes a load/save pair,
    so two concurrent writers to one sync code race and the later save wins.
    """

    def __init__(self, *, db_path: str | None = None) -> None:
        self.db_path = get_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            msg = "InstanceStore is not connected. Call connect() first."
            raise DatabaseError(msg)
        return self._conn

    async def connect(self) -> None:
        """Open the connection and initialize the schema."""
        if self._conn is not None:
            return

        if self.db_path != MEMORY_DB_PATH:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(self.db_path)
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA journal_mode = WAL")
            await schema.init_db(conn)
        except aiosqlite.Error as e:
            await conn.close()
            logger.error("init_db_failed", extra={"db_path": self.db_path, "error": str(e)})
            msg = f"Failed to initialize database at {self.db_path}: {e}"
            raise DatabaseError(msg) from e

        self._conn = conn
        logger.info("Opened SQLite connection", extra={"db_path": self.db_path})

    async def close(self) -> None:
        """Close the connection if open."""
        if self._conn is None:
            return

        conn, self._conn = self._conn, None
        try:
            await conn.close()
            logger.info("Closed SQLite connection", extra={"db_path": self.db_path})
        except aiosqlite.Error as e:
            logger.warning("Error closing SQLite connection", extra={"error": str(e), "db_path": self.db_path})

    async def _fetch_row(self, sync_id: str) -> aiosqlite.Row | None:
        query = (
            "SELECT schema_version, caretakers, chores, tending_log, last_tended_timestamp, last_tender "
            f"FROM {schema.TABLE_NAME} WHERE sync_id = ?"  # noqa: S608 - table name is a module constant
        )
        cursor = await self.connection.execute(query, (sync_id,))
        return await cursor.fetchone()

    async def _insert_default(self, sync_id: str) -> None:
        query = (
            f"INSERT OR IGNORE INTO {schema.TABLE_NAME} "  # noqa: S608
            "(sync_id, schema_version, caretakers, chores, tending_log, last_tended_timestamp, last_tender) "
            "VALUES (?, ?, '[]', ?, '[]', NULL, NULL)"
        )
        await self.connection.execute(query, (sync_id, constants.SCHEMA_VERSION, _dump_json(_default_chores())))
        await self.connection.commit()
        logger.info("Created instance", extra={"sync_id": sync_id})

    async def load(self, sync_id: str) -> Instance:
        """Fetch the instance for a sync code, creating it on first access."""
        try:
            row = await self._fetch_row(sync_id)
            if row is None:
                await self._insert_default(sync_id)
                row = await self._fetch_row(sync_id)
            if row is None:
                msg = f"Record not found in {schema.TABLE_NAME}: {sync_id}"
                raise RecordNotFoundError(msg)
            return _row_to_instance(row)
        except DatabaseError:
            raise
        except (aiosqlite.Error, ValueError) as e:
            logger.error("load_instance_failed", extra={"sync_id": sync_id, "error": str(e)})
            msg = f"Failed to load instance {sync_id}: {e}"
            raise DatabaseError(msg) from e

    async def save(self, sync_id: str, instance: Instance) -> None:
        """Overwrite every column of an existing instance row."""
        query = (
            f"UPDATE {schema.TABLE_NAME} "  # noqa: S608
            "SET schema_version = ?, caretakers = ?, chores = ?, tending_log = ?, "
            "last_tended_timestamp = ?, last_tender = ? "
            "WHERE sync_id = ?"
        )
        values = (
            instance.schema_version,
            _dump_json(instance.caretakers),
            _dump_json(instance.chores),
            _dump_json(instance.tending_log),
            instance.last_tended_timestamp,
            instance.last_tender,
            sync_id,
        )
        try:
            cursor = await self.connection.execute(query, values)
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.error("save_instance_failed", extra={"sync_id": sync_id, "error": str(e)})
            msg = f"Failed to save instance {sync_id}: {e}"
            raise DatabaseError(msg) from e

        if cursor.rowcount == 0:
            msg = f"Record not found in {schema.TABLE_NAME}: {sync_id}"
            raise RecordNotFoundError(msg)

        logger.info("Saved instance", extra={"sync_id": sync_id})
