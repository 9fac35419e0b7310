import logging
import re
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from backend.app.core.store import FilamentStore, get_store
from backend.app.schemas.filament import (
    ErrorResponse,
    FilamentCreate,
    FilamentUpdate,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/filaments", tags=["filaments"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Filament not found"}}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Filament not found"})


def _parse_id(raw: str) -> int | None:
    """Leading integer of the path segment, or None when there isn't one."""
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


@router.get("")
async def list_filaments(store: FilamentStore = Depends(get_store)):
    """List all filaments, unfiltered, in stored order."""
    return store.load_all()


@router.post("", status_code=201)
async def create_filament(
    request: Request,
    filament_data: FilamentCreate,
    store: FilamentStore = Depends(get_store),
):
    """Create a new filament. Any id sent by the caller is replaced.

    filament_data only type-checks the known fields; the raw body is stored.
    """
    filaments = store.load_all()
    filament = await request.json()
    filament["id"] = store.next_id(filaments)
    filaments.insert(0, filament)
    store.save_all(filaments)
    logger.info(f"Created filament {filament['id']} ({filament.get('name', '')})")
    return filament


@router.put("/{filament_id}", responses=NOT_FOUND)
async def update_filament(
    filament_id: str,
    request: Request,
    filament_data: FilamentUpdate,
    store: FilamentStore = Depends(get_store),
):
    """Merge the supplied fields into an existing filament."""
    filaments = store.load_all()
    target_id = _parse_id(filament_id)
    idx = None if target_id is None else store.find_index(filaments, target_id)
    if idx is None:
        return _not_found()

    patch = await request.json()
    patch.pop("id", None)
    filaments[idx] = {**filaments[idx], **patch}
    store.save_all(filaments)
    logger.info(f"Updated filament {target_id}: {', '.join(patch) or 'no fields'}")
    return filaments[idx]


@router.delete("/{filament_id}", response_model=SuccessResponse, responses=NOT_FOUND)
async def delete_filament(
    filament_id: str,
    store: FilamentStore = Depends(get_store),
):
    """Delete a filament."""
    filaments = store.load_all()
    target_id = _parse_id(filament_id)
    idx = None if target_id is None else store.find_index(filaments, target_id)
    if idx is None:
        return _not_found()

    del filaments[idx]
    store.save_all(filaments)
    logger.info(f"Deleted filament {target_id}")
    return {"success": True}


@router.post(
    "/import",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse, "description": "Payload is not a list"}},
)
async def import_filaments(
    payload: Any = Body(None),
    store: FilamentStore = Depends(get_store),
):
    """Replace the whole collection with the posted list, as-is."""
    if not isinstance(payload, list):
        logger.warning(f"Rejected filament import: expected a list, got {type(payload).__name__}")
        return JSONResponse(status_code=400, content={"error": "Invalid data"})

    store.save_all(payload)
    logger.info(f"Imported {len(payload)} filaments, replacing existing collection")
    return {"success": True}
