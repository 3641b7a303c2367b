"""Saved shopping lists (/api/shopping-lists)."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from kecarajo.api.dependencies import get_pantry_repository, get_shopping_list_repository
from kecarajo.infra.Pantry_Repository import PantryRepository
from kecarajo.infra.ShoppingList_Repository import (
    ShoppingItemNotFoundError,
    ShoppingListNotFoundError,
    ShoppingListRepository,
)
from kecarajo.utilities.validators import ShoppingItemInput, ShoppingListCreateInput, ShoppingListUpdateInput

router = APIRouter(prefix="/api/shopping-lists", tags=["shopping-lists"])
logger = logging.getLogger(__name__)


def _not_found(e: LookupError) -> HTTPException:
    kind = "Shopping list" if isinstance(e, ShoppingListNotFoundError) else "Item"
    return HTTPException(status_code=404, detail=f"{kind} '{e.args[0]}' not found")


@router.get("")
def get_lists(repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    lists = repo.get_lists()
    return {"lists": lists, "count": len(lists)}


@router.post("", status_code=201)
def create_list(payload: ShoppingListCreateInput,
                repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    return repo.create_list(payload.name, make_active=payload.is_active)


@router.get("/active")
def get_active_list(repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    active = repo.get_active_list()
    if active is None:
        raise HTTPException(status_code=404, detail="No active shopping list")
    return active


@router.get("/{list_id}")
def get_list(list_id: str, repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        return repo.get_list(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)


@router.patch("/{list_id}")
def update_list(list_id: str, payload: ShoppingListUpdateInput,
                repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        return repo.update_list(list_id, name=payload.name, is_active=payload.is_active)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)


@router.delete("/{list_id}")
def delete_list(list_id: str, repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        repo.delete_list(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)
    return {"success": True}


@router.post("/{list_id}/items", status_code=201)
def add_item(list_id: str, payload: ShoppingItemInput,
             repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        return repo.add_item(list_id, payload.model_dump())
    except ShoppingListNotFoundError as e:
        raise _not_found(e)


@router.post("/{list_id}/items/{item_id}/toggle")
def toggle_item(list_id: str, item_id: str,
                repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        return repo.toggle_item(list_id, item_id)
    except (ShoppingListNotFoundError, ShoppingItemNotFoundError) as e:
        raise _not_found(e)


@router.delete("/{list_id}/items/{item_id}")
def remove_item(list_id: str, item_id: str,
                repo: ShoppingListRepository = Depends(get_shopping_list_repository)):
    try:
        repo.remove_item(list_id, item_id)
    except (ShoppingListNotFoundError, ShoppingItemNotFoundError) as e:
        raise _not_found(e)
    return {"success": True}


@router.post("/{list_id}/to-pantry")
def move_purchased_to_pantry(list_id: str,
                             repo: ShoppingListRepository = Depends(get_shopping_list_repository),
                             pantry: PantryRepository = Depends(get_pantry_repository)):
    """Move purchased items into the pantry and drop them from the list."""
    try:
        purchased = repo.clear_purchased(list_id)
    except ShoppingListNotFoundError as e:
        raise _not_found(e)
    moved = []
    for item in purchased:
        moved.append(pantry.add_or_merge({
            "name": item["nombre"],
            "quantity": item["cantidad"],
            "unit": item["unidad"],
            "category": item["categoria"],
        }))
    logger.info("Moved %d purchased items from list %s to pantry", len(moved), list_id)
    return {"moved": moved, "count": len(moved)}
