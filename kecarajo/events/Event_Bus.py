"""Simple Event Bus / Observer implementation for pantry, shopping and price events.

Event names:
  pantry.low_stock -> {"item": PantryItem, "remaining": float, "threshold": float}
  pantry.near_expiry -> {"item": PantryItem, "days_left": int, "threshold": int}
  pantry.expiring_snapshot -> {"count": int, "items": [dict, ...]}
  shopping_list.generated -> {"total_items": int, "por_categoria": {categoria: count}}
  precios.alerta_disparada -> {"alert": dict}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

PANTRY_LOW_STOCK = "pantry.low_stock"
PANTRY_NEAR_EXPIRY = "pantry.near_expiry"
PANTRY_EXPIRING_SNAPSHOT = "pantry.expiring_snapshot"
SHOPPING_LIST_GENERATED = "shopping_list.generated"
PRICE_ALERT_TRIGGERED = "precios.alerta_disparada"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except ValueError:
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


GLOBAL_EVENT_BUS = EventBus()


def publicar(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publicar',
	'PANTRY_LOW_STOCK', 'PANTRY_NEAR_EXPIRY', 'PANTRY_EXPIRING_SNAPSHOT',
	'SHOPPING_LIST_GENERATED', 'PRICE_ALERT_TRIGGERED',
]
