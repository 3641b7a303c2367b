"""Pantry aggregate: stock items with low-stock and expiration tracking."""
from datetime import date, datetime
from typing import Any, List, Optional
from uuid import uuid4

from kecarajo.events.Event_Bus import GLOBAL_EVENT_BUS, PANTRY_LOW_STOCK, PANTRY_NEAR_EXPIRY
from kecarajo.utilities.constants import (
    CATEGORIA_DEFAULT,
    DATE_FORMAT,
    DAYS_BEFORE_EXPIRY,
    LOW_STOCK_THRESHOLD,
)


def parse_date(value: Any) -> Optional[date]:
    '''Accepts a date, a datetime, a DATE_FORMAT string or an ISO string. Anything else is None.'''
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace('Z', '+00:00')).date()
    except ValueError:
        return None


class PantryItem:
    def __init__(self, name: str = "", quantity: float = 0, unit: str = "",
                 expires_at: Optional[date] = None, category: str = CATEGORIA_DEFAULT,
                 id: Optional[str] = None):
        self.id = id or uuid4().hex
        self.name = name
        self.quantity = quantity
        self.unit = unit
        self.expires_at = expires_at
        self.category = category or CATEGORIA_DEFAULT

    def set_quantity(self, delta: float):
        '''Adjusts the quantity by the specified delta (can be negative).'''
        self.quantity += delta

    def days_left(self, today: Optional[date] = None) -> Optional[int]:
        if not self.expires_at:
            return None
        return (self.expires_at - (today or date.today())).days

    def __str__(self) -> str:
        parts = [f"{self.name} - {self.quantity} {self.unit}"]
        if self.expires_at:
            parts.append(f"Vence: {self.expires_at.strftime(DATE_FORMAT)}")
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data: Any) -> "PantryItem":
        '''Creates a PantryItem from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return PantryItem(
            name=d.get("name") or "",
            quantity=d.get("quantity") or 0,
            unit=d.get("unit") or "",
            expires_at=parse_date(d.get("expiresAt", d.get("expires_at"))),
            category=d.get("category") or CATEGORIA_DEFAULT,
            id=d.get("id") or None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "expiresAt": self.expires_at.strftime(DATE_FORMAT) if self.expires_at else "",
            "category": self.category,
        }


class Pantry:
    def __init__(self, event_bus=None):
        self.items: List[PantryItem] = []
        self._event_bus = event_bus or GLOBAL_EVENT_BUS

    # --- Observer helpers -------------------------------------------------
    def _notify_low_stock(self, item: PantryItem, threshold: float):
        self._event_bus.publish(PANTRY_LOW_STOCK, {
            "item": item,
            "remaining": item.quantity,
            "threshold": threshold,
        })

    def _notify_near_expiry(self, item: PantryItem, days_left: int):
        self._event_bus.publish(PANTRY_NEAR_EXPIRY, {
            "item": item,
            "days_left": days_left,
            "threshold": DAYS_BEFORE_EXPIRY,
        })

    # --- Mutations --------------------------------------------------------
    def add_item(self, item: PantryItem):
        self.items.append(item)
        self.evaluate_item(item)

    def remove_item(self, item: PantryItem):
        self.items.remove(item)

    def find(self, name: str) -> Optional[PantryItem]:
        for item in self.items:
            if item.name == name:
                return item
        return None

    def update_quantity(self, ingredient_name: str, new_quantity: float):
        '''
        Sets the quantity of a pantry item to new_quantity.
        '''
        if new_quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {new_quantity}")
        item = self.find(ingredient_name)
        if item is None:
            raise ValueError(f"Ingredient '{ingredient_name}' not found in pantry.")
        item.set_quantity(new_quantity - item.quantity)
        self.evaluate_item(item)

    # --- Evaluation logic --------------------------------------------------
    def evaluate_item(self, item: PantryItem):
        '''Publishes low-stock and near-expiry events for one item.'''
        threshold = LOW_STOCK_THRESHOLD.get(item.unit, 0)
        if threshold > 0 and item.quantity <= threshold:
            self._notify_low_stock(item, threshold)
        days_left = item.days_left()
        if days_left is not None and days_left <= DAYS_BEFORE_EXPIRY:
            self._notify_near_expiry(item, days_left)

    def scan_and_notify(self):
        for item in self.items:
            self.evaluate_item(item)
        return self

    def get_items(self) -> List[PantryItem]:
        return self.items

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Despensa:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    def from_dict(self, data):
        '''
        Populates the pantry from a list of dictionaries.
        '''
        for item_data in data:
            self.add_item(PantryItem.from_dict(item_data))
        return self

    def to_dict(self) -> List[dict]:
        return [item.to_dict() for item in self.items]
