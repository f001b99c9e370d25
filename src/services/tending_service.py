"""Tending service: recording that a caretaker completed a chore."""

import logging

from src.core.config import constants
from src.core.db_client import InstanceStore
from src.core.ids import generate_id, now_ms
from src.core.logging import span
from src.domain.instance import TendingEntry


logger = logging.getLogger(__name__)


async def tend_chore(
    *,
    store: InstanceStore,
    sync_id: str,
    tender: str,
    chore_id: str,
    notes: str | None = None,
) -> TendingEntry:
    """Append a tending entry and update the last-tended cache.

    The chore id is stored as given; it is not checked against the instance's
    chores.

    Args:
        store: Instance storage client
        sync_id: Sync code of the instance
        tender: Name of the caretaker credited
        chore_id: ID of the tended chore
        notes: Optional free-text notes

    Returns:
        The new log entry
    """
    with span("tending_service.tend_chore"):
        timestamp = now_ms()
        instance = await store.load(sync_id)
        entry = TendingEntry(
            id=generate_id(constants.HISTORY_ID_PREFIX, timestamp_ms=timestamp),
            timestamp=timestamp,
            person=tender,
            chore_id=chore_id,
            notes=notes,
        )
        instance.record_tending(entry)
        await store.save(sync_id, instance)

        logger.info(
            "Recorded tending",
            extra={
                "sync_id": sync_id,
                "entry_id": entry.id,
                "chore_id": chore_id,
                "known_chore": instance.find_chore(chore_id) is not None,
            },
        )
        return entry
