"""Pantry repository (file persistence)."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from kecarajo.domain.Pantry import Pantry, PantryItem
from kecarajo.infra.json_store import atomic_write_json, load_json
from kecarajo.infra.paths import PANTRY_FILE
from kecarajo.utilities.constants import CATEGORIAS, CATEGORIA_DEFAULT

logger = logging.getLogger(__name__)


class PantryItemNotFoundError(LookupError):
    pass


def _sanitize_item(data: Dict[str, Any]) -> Dict[str, Any]:
    item = PantryItem.from_dict(data).to_dict()
    if item['category'] not in CATEGORIAS:
        item['category'] = CATEGORIA_DEFAULT
    return item


class PantryRepository:
    def __init__(self, path: Optional[Path] = None, event_bus=None):
        self.path = Path(path) if path else PANTRY_FILE
        self.event_bus = event_bus

    def load_items(self) -> List[Dict[str, Any]]:
        data = load_json(self.path, [])
        if not isinstance(data, list):
            logger.warning("Pantry file %s does not hold a list; ignoring it.", self.path)
            return []
        items = [_sanitize_item(d) for d in data if isinstance(d, dict)]
        if items != data:
            # Persist repaired ids/categories so they stay stable across reads
            self.save_items(items)
        return items

    def save_items(self, items: List[Dict[str, Any]]) -> None:
        atomic_write_json(self.path, [_sanitize_item(d) for d in items if isinstance(d, dict)])

    def load_pantry(self, event_bus=None) -> Pantry:
        """Pantry aggregate built from the stored items; evaluates alerts on load."""
        return Pantry(event_bus or self.event_bus).from_dict(self.load_items())

    def _notify(self, item: Dict[str, Any]) -> None:
        Pantry(self.event_bus).evaluate_item(PantryItem.from_dict(item))

    def get_item(self, item_id: str) -> Dict[str, Any]:
        for item in self.load_items():
            if item['id'] == item_id:
                return item
        raise PantryItemNotFoundError(item_id)

    def add_item(self, data: Dict[str, Any]) -> Dict[str, Any]:
        items = self.load_items()
        new_item = _sanitize_item(data)
        items.append(new_item)
        self.save_items(items)
        logger.info("Pantry item added: %s %s %s", new_item['name'], new_item['quantity'], new_item['unit'])
        self._notify(new_item)
        return new_item

    def add_or_merge(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Add stock, merging into an item with the same name, unit and expiry if there is one."""
        items = self.load_items()
        incoming = _sanitize_item(data)
        for item in items:
            same = (item['name'].lower() == incoming['name'].lower()
                    and item['unit'] == incoming['unit']
                    and item['expiresAt'] == incoming['expiresAt'])
            if same:
                item['quantity'] = (item['quantity'] or 0) + (incoming['quantity'] or 0)
                self.save_items(items)
                self._notify(item)
                return item
        items.append(incoming)
        self.save_items(items)
        self._notify(incoming)
        return incoming

    def update_item(self, item_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply the given fields; a None expiresAt or category clears it."""
        items = self.load_items()
        for idx, item in enumerate(items):
            if item['id'] == item_id:
                merged = dict(item)
                merged.update(changes)
                merged['id'] = item_id
                items[idx] = _sanitize_item(merged)
                self.save_items(items)
                self._notify(items[idx])
                return items[idx]
        raise PantryItemNotFoundError(item_id)

    def delete_item(self, item_id: str) -> None:
        items = self.load_items()
        remaining = [i for i in items if i['id'] != item_id]
        if len(remaining) == len(items):
            raise PantryItemNotFoundError(item_id)
        self.save_items(remaining)


__all__ = ['PantryRepository', 'PantryItemNotFoundError']
