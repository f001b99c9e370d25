"""Caretaker service for CRUD operations on an instance's caretakers."""

import logging

from src.core.config import constants
from src.core.db_client import InstanceStore
from src.core.errors import ItemNotFoundError
from src.core.ids import generate_id
from src.core.logging import span
from src.domain.instance import Caretaker


logger = logging.getLogger(__name__)

CARETAKER_NOT_FOUND = "Caretaker not found"


async def list_caretakers(*, store: InstanceStore, sync_id: str) -> list[Caretaker]:
    """Return caretakers in insertion order."""
    instance = await store.load(sync_id)
    return instance.caretakers


async def create_caretaker(*, store: InstanceStore, sync_id: str, name: str) -> Caretaker:
    """Append a new caretaker.

    Args:
        store: Instance storage client
        sync_id: Sync code of the instance
        name: Validated, trimmed display name

    Returns:
        The created caretaker with its generated id
    """
    with span("caretaker_service.create_caretaker"):
        instance = await store.load(sync_id)
        caretaker = Caretaker(id=generate_id(constants.CARETAKER_ID_PREFIX), name=name)
        instance.caretakers.append(caretaker)
        await store.save(sync_id, instance)

        logger.info("Created caretaker", extra={"sync_id": sync_id, "caretaker_id": caretaker.id})
        return caretaker


async def rename_caretaker(*, store: InstanceStore, sync_id: str, caretaker_id: str, name: str) -> Caretaker:
    """Replace a caretaker's name.

    Raises:
        ItemNotFoundError: If no caretaker has the id
    """
    with span("caretaker_service.rename_caretaker"):
        instance = await store.load(sync_id)
        caretaker = instance.find_caretaker(caretaker_id)
        if caretaker is None:
            raise ItemNotFoundError(CARETAKER_NOT_FOUND)

        caretaker.name = name
        await store.save(sync_id, instance)

        logger.info("Renamed caretaker", extra={"sync_id": sync_id, "caretaker_id": caretaker_id})
        return caretaker


async def delete_caretaker(*, store: InstanceStore, sync_id: str, caretaker_id: str) -> None:
    """Remove a caretaker. Past tending entries keep the caretaker's name.

    Raises:
        ItemNotFoundError: If no caretaker has the id
    """
    with span("caretaker_service.delete_caretaker"):
        instance = await store.load(sync_id)
        remaining = [c for c in instance.caretakers if c.id != caretaker_id]
        if len(remaining) == len(instance.caretakers):
            raise ItemNotFoundError(CARETAKER_NOT_FOUND)

        instance.caretakers = remaining
        await store.save(sync_id, instance)

        logger.info("Deleted caretaker", extra={"sync_id": sync_id, "caretaker_id": caretaker_id})
