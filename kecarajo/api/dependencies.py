"""Repository providers for FastAPI `Depends`.

Tests swap them through `app.dependency_overrides`.
"""
from functools import lru_cache

from fastapi import Depends

from kecarajo.infra.Pantry_Repository import PantryRepository
from kecarajo.infra.Price_Repository import PriceRepository
from kecarajo.infra.ShoppingList_Repository import ShoppingListRepository
from kecarajo.logic.pricing.price_tracker import PriceTracker


@lru_cache(maxsize=None)
def get_pantry_repository() -> PantryRepository:
    return PantryRepository()


@lru_cache(maxsize=None)
def get_shopping_list_repository() -> ShoppingListRepository:
    return ShoppingListRepository()


@lru_cache(maxsize=None)
def get_price_repository() -> PriceRepository:
    return PriceRepository()


def get_price_tracker(repo: PriceRepository = Depends(get_price_repository)) -> PriceTracker:
    return PriceTracker(repo)
