"""Event helper utilities.

Typed publishers for the events defined in `kecarajo.events.Event_Bus`, so
callers do not build payload dicts by hand.
"""
from __future__ import annotations
from typing import Iterable, Mapping
from .Event_Bus import (
    publicar,
    PANTRY_EXPIRING_SNAPSHOT, SHOPPING_LIST_GENERATED, PRICE_ALERT_TRIGGERED,
)

__all__ = [
    'publish_expiring_snapshot', 'publish_shopping_list_generated', 'publish_price_alert',
]


def publish_expiring_snapshot(items: Iterable[dict]):
    """Publish a snapshot of pantry items that will expire soon.

    Payload structure:
        {
          'count': <int>,
          'items': [ { name, quantity, unit, exp, days_left, category }, ... ]
        }
    """
    items_list = items if isinstance(items, list) else list(items)
    publicar(PANTRY_EXPIRING_SNAPSHOT, {
        'count': len(items_list),
        'items': items_list,
    })


def publish_shopping_list_generated(total_items: int, por_categoria: Mapping[str, list]):
    publicar(SHOPPING_LIST_GENERATED, {
        'total_items': total_items,
        'por_categoria': {cat: len(items) for cat, items in por_categoria.items()},
    })


def publish_price_alert(alert: dict):
    publicar(PRICE_ALERT_TRIGGERED, {'alert': alert})
