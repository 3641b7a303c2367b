"""Shopping list builder.

Derives a shopping list from the expanded ingredients of a week's planned
meals minus what the pantry already holds:

    plan ingredients -> aggregate (exact lower-case key) -> subtract pantry
    (fuzzy name match, first match only) -> group by store section

Provides ShoppingListGenerator.generate_from_plan(...) and the process-wide
get_shopping_list_generator().
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from kecarajo.domain.Ingredient import MealPlanIngredient
from kecarajo.domain.Pantry import PantryItem
from kecarajo.domain.ShoppingList import GeneratedShoppingList, ShoppingListItem
from kecarajo.events.event_helpers import publish_shopping_list_generated
from kecarajo.logic.shopping.categories import detectar_categoria
from kecarajo.logic.shopping.matching import son_mismo_ingrediente
from kecarajo.logic.shopping.units import normalizar_unidad
from kecarajo.utilities.constants import PLANNING_HORIZON_DAYS

logger = logging.getLogger(__name__)


def _as_ingredient(value: Any) -> MealPlanIngredient:
    if isinstance(value, MealPlanIngredient):
        return value
    return MealPlanIngredient.from_dict(value)


def _as_pantry_item(value: Any) -> PantryItem:
    if isinstance(value, PantryItem):
        return value
    return PantryItem.from_dict(value)


def _receta_en(recetas: Optional[Sequence[str]], i: int) -> Optional[str]:
    # Positional: a short or missing list simply yields no recipe for index i.
    if recetas and i < len(recetas) and recetas[i]:
        return recetas[i]
    return None


class ShoppingListGenerator:

    def agregar_plan(self, ingredientes: Sequence[Any],
                     recetas: Optional[Sequence[str]] = None) -> Dict[str, ShoppingListItem]:
        """Merge repeated ingredient uses into one item per lower-cased name.

        Normalization happens once, on first sight. Later uses add their raw
        quantity to whatever is already stored, so 1500 ml + 500 ml gives
        1.5 + 500 = 501.5 "L".
        """
        items: Dict[str, ShoppingListItem] = {}
        for i, raw in enumerate(ingredientes):
            ingrediente = _as_ingredient(raw)
            key = ingrediente.name.lower()
            receta = _receta_en(recetas, i)

            existente = items.get(key)
            if existente is not None:
                existente.cantidad += ingrediente.quantity
                if receta:
                    existente.recetas_que_lo_usan.append(receta)
                continue

            cantidad, unidad = normalizar_unidad(ingrediente.quantity, ingrediente.unit)
            items[key] = ShoppingListItem(
                nombre=ingrediente.name,
                cantidad=cantidad,
                unidad=unidad,
                categoria=detectar_categoria(ingrediente.name),
                de_plan_semanal=True,
                recetas_que_lo_usan=[receta] if receta else [],
            )
        return items

    def restar_despensa(self, items: Dict[str, ShoppingListItem],
                        despensa: Iterable[Any]) -> Dict[str, ShoppingListItem]:
        """Subtract pantry stock in place and return the same mapping.

        Each pantry item is consumed against the first matching shopping item
        only. Quantities are subtracted as-is; pantry and plan units are not
        converted.
        """
        for raw in despensa:
            pantry_item = _as_pantry_item(raw)
            match_key = next(
                (key for key, item in items.items()
                 if son_mismo_ingrediente(pantry_item.name, item.nombre)),
                None,
            )
            if match_key is None:
                continue
            shopping_item = items[match_key]
            restante = shopping_item.cantidad - pantry_item.quantity
            if restante <= 0:
                del items[match_key]
            else:
                shopping_item.cantidad = restante
        return items

    def agrupar_por_categoria(self, items: Iterable[ShoppingListItem]) -> Dict[str, List[ShoppingListItem]]:
        grupos: Dict[str, List[ShoppingListItem]] = {}
        for item in items:
            grupos.setdefault(item.categoria, []).append(item)
        return grupos

    def generate_from_plan(self, meal_plan_ingredients: Sequence[Any],
                           pantry_items: Iterable[Any],
                           recipe_names: Optional[Sequence[str]] = None,
                           *, ahora: Optional[datetime] = None,
                           desde: Optional[datetime] = None,
                           hasta: Optional[datetime] = None) -> GeneratedShoppingList:
        """Build the shopping list for a plan.

        Args:
            meal_plan_ingredients: one entry per ingredient use across the plan
                (MealPlanIngredient or {name, quantity, unit} dicts).
            pantry_items: current stock (PantryItem or dicts).
            recipe_names: optional list aligned by index with meal_plan_ingredients.
            ahora: generation timestamp, defaults to datetime.now().
            desde, hasta: plan date range. Without them the range is
                ahora .. ahora + PLANNING_HORIZON_DAYS days.

        Returns:
            GeneratedShoppingList; items keep the first-seen ingredient order.
        """
        items_map = self.agregar_plan(meal_plan_ingredients, recipe_names)
        self.restar_despensa(items_map, pantry_items)

        items = list(items_map.values())
        por_categoria = self.agrupar_por_categoria(items)

        ahora = ahora or datetime.now()
        desde = desde or ahora
        hasta = hasta or (ahora + timedelta(days=PLANNING_HORIZON_DAYS))

        lista = GeneratedShoppingList(
            items=items,
            fecha_generacion=ahora,
            desde=desde,
            hasta=hasta,
            por_categoria=por_categoria,
        )
        logger.debug("Shopping list generated: %d plan uses -> %d items in %d categories",
                     len(meal_plan_ingredients), lista.total_items, len(por_categoria))
        publish_shopping_list_generated(lista.total_items, por_categoria)
        return lista

    @staticmethod
    def format_cantidad(cantidad: float, unidad: str) -> str:
        """'500 g' for whole amounts, one decimal otherwise ('1.5 L')."""
        if cantidad % 1 == 0:
            texto = str(int(cantidad))
        else:
            texto = f"{cantidad:.1f}"
        return f"{texto} {unidad}"


_generator: Optional[ShoppingListGenerator] = None


def get_shopping_list_generator() -> ShoppingListGenerator:
    global _generator
    if _generator is None:
        _generator = ShoppingListGenerator()
    return _generator


__all__ = ['ShoppingListGenerator', 'get_shopping_list_generator']
