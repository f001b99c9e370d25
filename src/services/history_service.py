"""History service: reading and pruning the tending log."""

import logging

from src.core.db_client import InstanceStore
from src.core.errors import ItemNotFoundError
from src.core.logging import span
from src.domain.instance import LastTended, TendingEntry


logger = logging.getLogger(__name__)

HISTORY_ENTRY_NOT_FOUND = "History entry not found"


async def list_history(*, store: InstanceStore, sync_id: str) -> list[TendingEntry]:
    """Return the tending log, newest first."""
    instance = await store.load(sync_id)
    return instance.sorted_history()


async def delete_history_entry(*, store: InstanceStore, sync_id: str, entry_id: str) -> None:
    """Remove one tending entry and recompute the last-tended cache.

    Raises:
        ItemNotFoundError: If no entry has the id
    """
    with span("history_service.delete_history_entry"):
        instance = await store.load(sync_id)
        remaining = [entry for entry in instance.tending_log if entry.id != entry_id]
        if len(remaining) == len(instance.tending_log):
            raise ItemNotFoundError(HISTORY_ENTRY_NOT_FOUND)

        instance.tending_log = remaining
        instance.recompute_last_tended()
        await store.save(sync_id, instance)

        logger.info(
            "Deleted history entry",
            extra={
                "sync_id": sync_id,
                "entry_id": entry_id,
                "last_tended_timestamp": instance.last_tended_timestamp,
            },
        )


async def get_last_tended(*, store: InstanceStore, sync_id: str) -> LastTended:
    """Return the instance-wide most recent tending event."""
    instance = await store.load(sync_id)
    return instance.last_tended()
