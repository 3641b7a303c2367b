"""Pantry (despensa) endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from kecarajo.api.dependencies import get_pantry_repository
from kecarajo.events.event_helpers import publish_expiring_snapshot
from kecarajo.infra.Pantry_Repository import PantryItemNotFoundError, PantryRepository
from kecarajo.logic.pantry.analysis import compute_pantry_snapshots
from kecarajo.utilities.constants import DAYS_BEFORE_EXPIRY
from kecarajo.utilities.validators import PantryItemInput, PantryItemUpdate

router = APIRouter(prefix="/api/pantry", tags=["pantry"])
logger = logging.getLogger(__name__)


@router.get("")
def list_pantry(category: Optional[str] = Query(default=None),
                repo: PantryRepository = Depends(get_pantry_repository)):
    items = repo.load_items()
    if category and category != "all":
        items = [i for i in items if i['category'] == category]
    return {"items": items, "count": len(items)}


@router.post("", status_code=201)
def add_pantry_item(payload: PantryItemInput, repo: PantryRepository = Depends(get_pantry_repository)):
    return repo.add_item(payload.model_dump())


@router.get("/alerts")
def pantry_alerts(window: Optional[int] = Query(default=None, ge=0),
                  repo: PantryRepository = Depends(get_pantry_repository)):
    expiring_window = window if window is not None else DAYS_BEFORE_EXPIRY
    expiring, low = compute_pantry_snapshots(repo.load_items(), window=expiring_window)
    if expiring:
        publish_expiring_snapshot(expiring)
    return {
        "window": expiring_window,
        "expiring_soon": expiring,
        "low_stock": low,
    }


@router.patch("/{item_id}")
def update_pantry_item(item_id: str, payload: PantryItemUpdate,
                       repo: PantryRepository = Depends(get_pantry_repository)):
    try:
        return repo.update_item(item_id, payload.model_dump(exclude_unset=True))
    except PantryItemNotFoundError:
        raise HTTPException(status_code=404, detail=f"Pantry item '{item_id}' not found")


@router.delete("/{item_id}")
def delete_pantry_item(item_id: str, repo: PantryRepository = Depends(get_pantry_repository)):
    try:
        repo.delete_item(item_id)
    except PantryItemNotFoundError:
        raise HTTPException(status_code=404, detail=f"Pantry item '{item_id}' not found")
    logger.info("Pantry item deleted: %s", item_id)
    return {"success": True}
