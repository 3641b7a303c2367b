"""Saved shopping lists (file persistence).

Store layout (shopping_lists.json):
    [ { id, name, is_active, created_at, updated_at,
        items: [ { id, nombre, cantidad, unidad, categoria, comprado,
                   dePlanSemanal, recetasQueLoUsan, position }, ... ] }, ... ]

At most one list is active. Ids that are not valid UUIDs are replaced on load.
"""
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from kecarajo.domain.ShoppingList import ShoppingListItem
from kecarajo.infra.json_store import atomic_write_json, load_json
from kecarajo.infra.paths import SHOPPING_LISTS_FILE
from kecarajo.logic.shopping.categories import detectar_categoria

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.IGNORECASE)


class ShoppingListNotFoundError(LookupError):
    pass


class ShoppingItemNotFoundError(LookupError):
    pass


def _now() -> str:
    return datetime.now().isoformat()


def _valid_id(value: Any) -> str:
    if isinstance(value, str) and UUID_PATTERN.match(value):
        return value
    return str(uuid4())


def _sanitize_item(data: Dict[str, Any], position: int) -> Dict[str, Any]:
    nombre = str(data.get('nombre') or '')
    return {
        'id': _valid_id(data.get('id')),
        'nombre': nombre,
        'cantidad': data.get('cantidad') or 0,
        'unidad': data.get('unidad') or '',
        'categoria': data.get('categoria') or detectar_categoria(nombre),
        'comprado': bool(data.get('comprado', False)),
        'dePlanSemanal': bool(data.get('dePlanSemanal', False)),
        'recetasQueLoUsan': list(data.get('recetasQueLoUsan') or []),
        'position': position,
    }


def _sanitize_list(data: Dict[str, Any]) -> Dict[str, Any]:
    items = [i for i in (data.get('items') or []) if isinstance(i, dict) and i.get('nombre')]
    return {
        'id': _valid_id(data.get('id')),
        'name': data.get('name') or 'Lista de compras',
        'is_active': bool(data.get('is_active', False)),
        'created_at': data.get('created_at') or _now(),
        'updated_at': data.get('updated_at') or _now(),
        'items': [_sanitize_item(i, pos) for pos, i in enumerate(items)],
    }


class ShoppingListRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else SHOPPING_LISTS_FILE

    # --- storage -----------------------------------------------------------
    def _load(self) -> List[Dict[str, Any]]:
        data = load_json(self.path, [])
        if not isinstance(data, list):
            logger.warning("Shopping list file %s does not hold a list; ignoring it.", self.path)
            return []
        lists = [_sanitize_list(d) for d in data if isinstance(d, dict)]
        if lists != data:
            self._save(lists)
        return lists

    def _save(self, lists: List[Dict[str, Any]]) -> None:
        atomic_write_json(self.path, lists)

    @staticmethod
    def _find(lists: List[Dict[str, Any]], list_id: str) -> Dict[str, Any]:
        for sl in lists:
            if sl['id'] == list_id:
                return sl
        raise ShoppingListNotFoundError(list_id)

    # --- lists -------------------------------------------------------------
    def get_lists(self) -> List[Dict[str, Any]]:
        """All lists, newest first."""
        return sorted(self._load(), key=lambda sl: sl['created_at'], reverse=True)

    def get_list(self, list_id: str) -> Dict[str, Any]:
        return self._find(self._load(), list_id)

    def get_active_list(self) -> Optional[Dict[str, Any]]:
        for sl in self._load():
            if sl['is_active']:
                return sl
        return None

    def create_list(self, name: str, make_active: bool = False) -> Dict[str, Any]:
        lists = self._load()
        if make_active:
            for sl in lists:
                sl['is_active'] = False
        new_list = _sanitize_list({'name': name, 'is_active': make_active})
        lists.append(new_list)
        self._save(lists)
        logger.info("Shopping list created: %s (%s)", new_list['name'], new_list['id'])
        return new_list

    def update_list(self, list_id: str, *, name: Optional[str] = None,
                    is_active: Optional[bool] = None) -> Dict[str, Any]:
        lists = self._load()
        target = self._find(lists, list_id)
        if name is not None:
            target['name'] = name
        if is_active is not None:
            if is_active:
                for sl in lists:
                    sl['is_active'] = False
            target['is_active'] = is_active
        target['updated_at'] = _now()
        self._save(lists)
        return target

    def delete_list(self, list_id: str) -> None:
        lists = self._load()
        self._find(lists, list_id)
        self._save([sl for sl in lists if sl['id'] != list_id])

    # --- items -------------------------------------------------------------
    def add_item(self, list_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        lists = self._load()
        target = self._find(lists, list_id)
        item = _sanitize_item(data, len(target['items']))
        target['items'].append(item)
        target['updated_at'] = _now()
        self._save(lists)
        return item

    def add_generated_items(self, list_id: str, items: Iterable[ShoppingListItem]) -> Dict[str, Any]:
        """Append generator output to a list; returns the updated list."""
        lists = self._load()
        target = self._find(lists, list_id)
        for item in items:
            target['items'].append(_sanitize_item(item.to_dict(), len(target['items'])))
        target['updated_at'] = _now()
        self._save(lists)
        return target

    def toggle_item(self, list_id: str, item_id: str) -> Dict[str, Any]:
        lists = self._load()
        target = self._find(lists, list_id)
        for item in target['items']:
            if item['id'] == item_id:
                item['comprado'] = not item['comprado']
                target['updated_at'] = _now()
                self._save(lists)
                return item
        raise ShoppingItemNotFoundError(item_id)

    def remove_item(self, list_id: str, item_id: str) -> None:
        lists = self._load()
        target = self._find(lists, list_id)
        remaining = [i for i in target['items'] if i['id'] != item_id]
        if len(remaining) == len(target['items']):
            raise ShoppingItemNotFoundError(item_id)
        target['items'] = [dict(i, position=pos) for pos, i in enumerate(remaining)]
        target['updated_at'] = _now()
        self._save(lists)

    def clear_purchased(self, list_id: str) -> List[Dict[str, Any]]:
        """Remove purchased items from the list and return them."""
        lists = self._load()
        target = self._find(lists, list_id)
        purchased = [i for i in target['items'] if i['comprado']]
        pending = [i for i in target['items'] if not i['comprado']]
        target['items'] = [dict(i, position=pos) for pos, i in enumerate(pending)]
        target['updated_at'] = _now()
        self._save(lists)
        return purchased


__all__ = ['ShoppingListRepository', 'ShoppingListNotFoundError', 'ShoppingItemNotFoundError']
