"""Chore service for CRUD operations on an instance's chores."""

import logging

from src.core.config import constants
from src.core.db_client import InstanceStore
from src.core.errors import ItemNotFoundError
from src.core.ids import generate_id
from src.core.logging import span
from src.domain.instance import Chore


logger = logging.getLogger(__name__)

CHORE_NOT_FOUND = "Chore not found"


async def list_chores(*, store: InstanceStore, sync_id: str) -> list[Chore]:
    """Return chores in insertion order."""
    instance = await store.load(sync_id)
    return instance.chores


async def get_chore(*, store: InstanceStore, sync_id: str, chore_id: str) -> Chore:
    """Look up one chore.

    Tending entries may reference chores that were deleted since, so callers
    resolving a history entry must expect this to raise.

    Raises:
        ItemNotFoundError: If no chore has the id
    """
    instance = await store.load(sync_id)
    chore = instance.find_chore(chore_id)
    if chore is None:
        raise ItemNotFoundError(CHORE_NOT_FOUND)
    return chore


async def create_chore(*, store: InstanceStore, sync_id: str, name: str, icon: str) -> Chore:
    """Append a new chore.

    Args:
        store: Instance storage client
        sync_id: Sync code of the instance
        name: Validated, trimmed chore name
        icon: Validated, trimmed icon

    Returns:
        The created chore with its generated id
    """
    with span("chore_service.create_chore"):
        instance = await store.load(sync_id)
        chore = Chore(id=generate_id(constants.CHORE_ID_PREFIX), name=name, icon=icon)
        instance.chores.append(chore)
        await store.save(sync_id, instance)

        logger.info("Created chore", extra={"sync_id": sync_id, "chore_id": chore.id})
        return chore


async def update_chore(
    *,
    store: InstanceStore,
    sync_id: str,
    chore_id: str,
    name: str | None = None,
    icon: str | None = None,
) -> Chore:
    """Apply whichever of name/icon is given; a None field is left unchanged.

    Raises:
        ItemNotFoundError: If no chore has the id
    """
    with span("chore_service.update_chore"):
        instance = await store.load(sync_id)
        chore = instance.find_chore(chore_id)
        if chore is None:
            raise ItemNotFoundError(CHORE_NOT_FOUND)

        if name:
            chore.name = name
        if icon:
            chore.icon = icon
        await store.save(sync_id, instance)

        logger.info(
            "Updated chore",
            extra={"sync_id": sync_id, "chore_id": chore_id, "name_changed": bool(name), "icon_changed": bool(icon)},
        )
        return chore


async def delete_chore(*, store: InstanceStore, sync_id: str, chore_id: str) -> None:
    """Remove a chore. Tending entries that reference it are kept.

    Raises:
        ItemNotFoundError: If no chore has the id
    """
    with span("chore_service.delete_chore"):
        instance = await store.load(sync_id)
        remaining = [c for c in instance.chores if c.id != chore_id]
        if len(remaining) == len(instance.chores):
            raise ItemNotFoundError(CHORE_NOT_FOUND)

        instance.chores = remaining
        await store.save(sync_id, instance)

        orphaned = sum(1 for entry in instance.tending_log if entry.chore_id == chore_id)
        logger.info(
            "Deleted chore",
            extra={"sync_id": sync_id, "chore_id": chore_id, "orphaned_log_entries": orphaned},
        )
