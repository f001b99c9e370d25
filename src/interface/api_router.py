"""REST endpoints under /api/{sync_id}/{resource}/{item_id}."""

import logging
from typing import TypeVar

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, ValidationError
from starlette.types import ASGIApp, Receive, Scope, Send

from src.core.config import settings
from src.core.db_client import InstanceStore
from src.core.errors import InvalidPayloadError, RouteNotFoundError
from src.domain.create_models import CaretakerCreate, ChoreCreate, TendCreate
from src.domain.instance import Caretaker, Chore, LastTended, TendingEntry
from src.domain.update_models import CaretakerUpdate, ChoreUpdate
from src.services import caretaker_service, chore_service, history_service, tending_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

ModelT = TypeVar("ModelT", bound=BaseModel)

# Error messages
ERROR_MSG_INVALID_JSON = "Invalid JSON payload"
ERROR_MSG_CARETAKER_NAME = "Invalid name for caretaker"
ERROR_MSG_CARETAKER_NEW_NAME = "Invalid new name for caretaker"
ERROR_MSG_CHORE_FIELDS = "Invalid name or icon for chore"
ERROR_MSG_TEND_FIELDS = "Invalid tender or chore identifier"


def split_path(path: str) -> list[str]:
    """Split a URL path into its non-empty segments."""
    return [part for part in path.split("/") if part.strip()]


class NormalizeApiPathMiddleware:
    """Drop empty segments from /api paths so ``//api/s//chores/`` routes like ``/api/s/chores``."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            segments = split_path(scope["path"])
            if segments[:1] == ["api"]:
                scope = {**scope, "path": "/" + "/".join(segments)}
        await self.app(scope, receive, send)


def get_store(request: Request) -> InstanceStore:
    """Return the storage client created during application startup."""
    return request.app.state.store


async def _read_payload(request: Request, model: type[ModelT], error_message: str) -> ModelT:
    """Parse the JSON body and validate it against a model, rejecting on the first mismatch.

    Raises:
        InvalidPayloadError: If the body is not a JSON object or fails validation
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise InvalidPayloadError(ERROR_MSG_INVALID_JSON) from e

    if not isinstance(payload, dict):
        raise InvalidPayloadError(error_message)

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        logger.info(
            "payload_rejected",
            extra={"model": model.__name__, "field": ".".join(str(p) for p in first["loc"]), "reason": first["msg"]},
        )
        raise InvalidPayloadError(error_message) from e


@router.get("/app-version")
async def get_app_version() -> dict[str, str]:
    """Report the client version the server ships, used for PWA update prompts."""
    return {"version": settings.app_version}


# Caretakers


@router.get("/{sync_id}/caretakers")
async def list_caretakers(sync_id: str, store: InstanceStore = Depends(get_store)) -> list[Caretaker]:
    return await caretaker_service.list_caretakers(store=store, sync_id=sync_id)


@router.post("/{sync_id}/caretakers", status_code=status.HTTP_201_CREATED)
async def create_caretaker(sync_id: str, request: Request, store: InstanceStore = Depends(get_store)) -> Caretaker:
    payload = await _read_payload(request, CaretakerCreate, ERROR_MSG_CARETAKER_NAME)
    return await caretaker_service.create_caretaker(store=store, sync_id=sync_id, name=payload.name)


@router.put("/{sync_id}/caretakers/{caretaker_id}")
async def rename_caretaker(
    sync_id: str,
    caretaker_id: str,
    request: Request,
    store: InstanceStore = Depends(get_store),
) -> Caretaker:
    payload = await _read_payload(request, CaretakerUpdate, ERROR_MSG_CARETAKER_NEW_NAME)
    return await caretaker_service.rename_caretaker(
        store=store, sync_id=sync_id, caretaker_id=caretaker_id, name=payload.name
    )


@router.delete("/{sync_id}/caretakers/{caretaker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_caretaker(sync_id: str, caretaker_id: str, store: InstanceStore = Depends(get_store)) -> Response:
    await caretaker_service.delete_caretaker(store=store, sync_id=sync_id, caretaker_id=caretaker_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Chores


@router.get("/{sync_id}/chores")
async def list_chores(sync_id: str, store: InstanceStore = Depends(get_store)) -> list[Chore]:
    return await chore_service.list_chores(store=store, sync_id=sync_id)


@router.post("/{sync_id}/chores", status_code=status.HTTP_201_CREATED)
async def create_chore(sync_id: str, request: Request, store: InstanceStore = Depends(get_store)) -> Chore:
    payload = await _read_payload(request, ChoreCreate, ERROR_MSG_CHORE_FIELDS)
    return await chore_service.create_chore(store=store, sync_id=sync_id, name=payload.name, icon=payload.icon)


@router.get("/{sync_id}/chores/{chore_id}")
async def get_chore(sync_id: str, chore_id: str, store: InstanceStore = Depends(get_store)) -> Chore:
    return await chore_service.get_chore(store=store, sync_id=sync_id, chore_id=chore_id)


@router.put("/{sync_id}/chores/{chore_id}")
async def update_chore(
    sync_id: str,
    chore_id: str,
    request: Request,
    store: InstanceStore = Depends(get_store),
) -> Chore:
    payload = await _read_payload(request, ChoreUpdate, ERROR_MSG_CHORE_FIELDS)
    return await chore_service.update_chore(
        store=store, sync_id=sync_id, chore_id=chore_id, name=payload.name, icon=payload.icon
    )


@router.delete("/{sync_id}/chores/{chore_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chore(sync_id: str, chore_id: str, store: InstanceStore = Depends(get_store)) -> Response:
    await chore_service.delete_chore(store=store, sync_id=sync_id, chore_id=chore_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# History and tending


@router.get("/{sync_id}/history")
async def list_history(sync_id: str, store: InstanceStore = Depends(get_store)) -> list[TendingEntry]:
    return await history_service.list_history(store=store, sync_id=sync_id)


@router.delete("/{sync_id}/history/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_history_entry(sync_id: str, entry_id: str, store: InstanceStore = Depends(get_store)) -> Response:
    await history_service.delete_history_entry(store=store, sync_id=sync_id, entry_id=entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{sync_id}/tend", status_code=status.HTTP_201_CREATED)
async def tend_chore(sync_id: str, request: Request, store: InstanceStore = Depends(get_store)) -> TendingEntry:
    payload = await _read_payload(request, TendCreate, ERROR_MSG_TEND_FIELDS)
    assert payload.tender is not None  # guaranteed by TendCreate.validate_tender
    return await tending_service.tend_chore(
        store=store,
        sync_id=sync_id,
        tender=payload.tender,
        chore_id=payload.choreId,
        notes=payload.notes,
    )


@router.get("/{sync_id}/last-tended")
async def get_last_tended(sync_id: str, store: InstanceStore = Depends(get_store)) -> LastTended:
    return await history_service.get_last_tended(store=store, sync_id=sync_id)


@router.get("/{sync_id}/app-version")
async def get_instance_app_version(sync_id: str) -> dict[str, str]:  # noqa: ARG001
    return {"version": settings.app_version}


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def unmatched_api_route(path: str) -> Response:
    """Answer every /api path and method no handler above claims."""
    logger.info("api_route_not_found", extra={"path": path})
    raise RouteNotFoundError
